# src/planit/core/i18n.py

from __future__ import annotations

from collections.abc import Callable

DEFAULT_LANGUAGE = "en"

STRINGS: dict[str, dict[str, str]] = {
    "en": {
        "app.title": "PlanIt",
        "app.settings": "Settings",
        "app.refresh": "Refresh Tasks",
        "app.toggle_theme": "Toggle Theme",
        "app.loading": "Loading tasks...",
        "app.not_configured": "Configure Notion access in settings.",
        "app.all_clear": "All tasks clear for today",
        "task.overdue": "Overdue",
        "alert.fetch_failed": "Failed to fetch tasks: {error}",
        "alert.complete_failed": "Failed to sync completion: {error}",
        "alert.databases_failed": "Failed to list databases: {error}",
        "settings.title": "Settings",
        "settings.notion": "Notion Configuration",
        "settings.token": "Notion Integration Token",
        "settings.objective_db": "Objectives Database ID",
        "settings.tasks_db": "Tasks Database ID",
        "settings.find_databases": "Find databases",
        "settings.window": "Window & Appearance",
        "settings.anchor": "Anchor Position",
        "settings.always_on_top": "Always on Top",
        "settings.opacity": "Window Opacity",
        "settings.autostart": "Start at login",
        "settings.language": "Language",
        "settings.save": "Save & Continue",
        "settings.saved": "Saved!",
        "settings.required": "All fields are required",
        "settings.hint": "Ensure your Integration is connected to both databases in Notion.",
        "onboarding.welcome": "Welcome to PlanIt",
        "onboarding.intro": "Your Notion tasks, always in sight.",
        "onboarding.steps.step1": "Create a Notion integration and copy its token.",
        "onboarding.steps.step2": "Share your Tasks and Objectives databases with the integration.",
        "onboarding.steps.step3": "Paste the token and both database IDs in Settings.",
        "onboarding.shortcuts.title": "Shortcuts",
        "onboarding.shortcuts.refresh": "Refresh tasks",
        "onboarding.shortcuts.settings": "Open settings",
        "onboarding.shortcuts.theme": "Toggle theme",
        "onboarding.shortcuts.hide": "Close / hide",
        "onboarding.button": "Get started",
    },
    "es": {
        "app.title": "PlanIt",
        "app.settings": "Ajustes",
        "app.refresh": "Actualizar tareas",
        "app.toggle_theme": "Cambiar tema",
        "app.loading": "Cargando tareas...",
        "app.not_configured": "Configura el acceso a Notion en los ajustes.",
        "app.all_clear": "No quedan tareas para hoy",
        "task.overdue": "Vencida",
        "alert.fetch_failed": "No se pudieron obtener las tareas: {error}",
        "alert.complete_failed": "No se pudo sincronizar la tarea: {error}",
        "alert.databases_failed": "No se pudieron listar las bases de datos: {error}",
        "settings.title": "Ajustes",
        "settings.notion": "Configuración de Notion",
        "settings.token": "Token de integración de Notion",
        "settings.objective_db": "ID de la base de objetivos",
        "settings.tasks_db": "ID de la base de tareas",
        "settings.find_databases": "Buscar bases de datos",
        "settings.window": "Ventana y apariencia",
        "settings.anchor": "Posición",
        "settings.always_on_top": "Siempre visible",
        "settings.opacity": "Opacidad",
        "settings.autostart": "Iniciar al arrancar",
        "settings.language": "Idioma",
        "settings.save": "Guardar y continuar",
        "settings.saved": "¡Guardado!",
        "settings.required": "Todos los campos son obligatorios",
        "settings.hint": "Asegúrate de que la integración esté conectada a ambas bases de datos.",
        "onboarding.welcome": "Bienvenido a PlanIt",
        "onboarding.intro": "Tus tareas de Notion, siempre a la vista.",
        "onboarding.steps.step1": "Crea una integración de Notion y copia su token.",
        "onboarding.steps.step2": "Comparte tus bases de Tareas y Objetivos con la integración.",
        "onboarding.steps.step3": "Pega el token y ambos IDs en los ajustes.",
        "onboarding.shortcuts.title": "Atajos",
        "onboarding.shortcuts.refresh": "Actualizar tareas",
        "onboarding.shortcuts.settings": "Abrir ajustes",
        "onboarding.shortcuts.theme": "Cambiar tema",
        "onboarding.shortcuts.hide": "Cerrar / ocultar",
        "onboarding.button": "Empezar",
    },
}

LANGUAGES: dict[str, str] = {"en": "English", "es": "Español"}


def normalize_language(code: str | None) -> str:
    if not code:
        return DEFAULT_LANGUAGE
    base = code.strip().lower().replace("_", "-").split("-")[0]
    return base if base in STRINGS else DEFAULT_LANGUAGE


def translator(language: str | None) -> Callable[[str], str]:
    """Lookup for `language`, falling back to English, then to the key itself."""
    table = STRINGS[normalize_language(language)]
    fallback = STRINGS[DEFAULT_LANGUAGE]

    def t(key: str) -> str:
        return table.get(key) or fallback.get(key) or key

    return t
