# toolroom/data/menu.py

# Navigation layout served while menu_categories is empty
DEFAULT_MENU: list[dict] = [
    {
        "slug": "ai",
        "name": "AI & Analiz",
        "icon": "Cpu",
        "color": "from-violet-500 to-purple-700",
        "bg_color": "bg-violet-500/10",
        "text_color": "text-violet-400",
        "border_color": "border-violet-500/30",
        "sort_order": 0,
        "modules": ["ai-learn", "drawing"],
    },
    {
        "slug": "machining",
        "name": "İşleme",
        "icon": "Wrench",
        "color": "from-orange-500 to-amber-700",
        "bg_color": "bg-orange-500/10",
        "text_color": "text-orange-400",
        "border_color": "border-orange-500/30",
        "sort_order": 1,
        "modules": ["cutting", "toollife", "threading", "drilling", "tolerance"],
    },
    {
        "slug": "analysis",
        "name": "Maliyet & Karşılaştırma",
        "icon": "BarChart3",
        "color": "from-emerald-500 to-green-700",
        "bg_color": "bg-emerald-500/10",
        "text_color": "text-emerald-400",
        "border_color": "border-emerald-500/30",
        "sort_order": 2,
        "modules": ["costcalc", "cost", "compare"],
    },
    {
        "slug": "data",
        "name": "Veri",
        "icon": "FolderOpen",
        "color": "from-sky-500 to-blue-700",
        "bg_color": "bg-sky-500/10",
        "text_color": "text-sky-400",
        "border_color": "border-sky-500/30",
        "sort_order": 3,
        "modules": ["materials", "history"],
    },
]

ADMIN_PANEL_LABELS: dict[str, str] = {
    "admin_users": "Kullanıcılar",
    "admin_customers": "Müşteriler",
    "admin_factories": "Fabrikalar",
    "admin_machines": "Makine Parkı",
    "admin_modules": "Modüller",
    "admin_menu": "Menü Yönetimi",
    "admin_feedback": "AI Eğitim",
    "admin_improvements": "İyileştirmeler",
    "admin_maintenance": "Bakım Onarım",
    "admin_toolroom": "Takımhane Raporu",
}

ADMIN_PANEL_KEYS = tuple(ADMIN_PANEL_LABELS)
