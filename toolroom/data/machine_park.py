# toolroom/data/machine_park.py
"""Default machine park used to seed an empty ``machines`` table."""

DEFAULT_MACHINES: list[dict] = [
    {"code": "T302", "type": "turning", "designation": "CNC Torna", "brand": "HYUNDAI KIA", "model": "SKT 250 FOI TD", "year": 2010, "label": "T302 - Hyundai SKT 250"},
    {"code": "T108", "type": "turning", "designation": "CNC Torna", "brand": "HYUNDAI WIA", "model": "L 300LC", "year": 2017, "label": "T108 - Hyundai L300LC"},
    {"code": "T106", "type": "turning", "designation": "CNC Torna", "brand": "HYUNDAI WIA", "model": "L 300LC", "year": 2019, "label": "T106 - Hyundai L300LC"},
    {"code": "T100", "type": "turning", "designation": "CNC Torna", "brand": "HYUNDAI KIA", "model": "SKT 21 FOI-TC", "year": 2009, "label": "T100 - Hyundai SKT 21"},
    {"code": "T109", "type": "turning", "designation": "CNC Torna", "brand": "DMG MORI", "model": "CLX 450", "year": 2019, "label": "T109 - DMG CLX 450"},
    {"code": "T200", "type": "turning", "designation": "CNC Torna", "brand": "DMG MORI SEIKI", "model": "CTX 310 ECOLINE", "year": 2013, "label": "T200 - DMG CTX 310"},
    {"code": "T121", "type": "milling-4axis", "designation": "4 Eksen CNC Freze", "brand": "OKUMA", "model": "GENOS M560R-V", "year": 2016, "label": "T121 - Okuma M560R-V"},
    {"code": "T122", "type": "milling-4axis", "designation": "4 Eksen CNC Freze", "brand": "OKUMA", "model": "GENOS M560R-V", "year": 2017, "label": "T122 - Okuma M560R-V"},
    {"code": "T125", "type": "milling-4axis", "designation": "4 Eksen CNC Freze", "brand": "OKUMA", "model": "GENOS M560R-V", "year": 2018, "label": "T125 - Okuma M560R-V"},
    {"code": "T137", "type": "milling-5axis", "designation": "3+2 / 5 Eksen CNC Freze", "brand": "DECKEL MAHO", "model": "DMU 50U", "year": 2019, "label": "T137 - DMU 50U (5 Eksen)"},
    {"code": "T138", "type": "milling-5axis", "designation": "3+2 / 5 Eksen CNC Freze", "brand": "DECKEL MAHO", "model": "DMU 70U", "year": 2019, "label": "T138 - DMU 70U (5 Eksen)"},
]
