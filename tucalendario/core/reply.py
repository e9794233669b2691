from __future__ import annotations

from datetime import datetime
from urllib.parse import quote

from tucalendario.core.events import BOT_NAME, POPUP_REMINDER_MINUTES
from tucalendario.core.models import CalendarEvent
from tucalendario.core.title_cleaner import capitalize_first

GOOGLE_TEMPLATE_URL = "https://www.google.com/calendar/event"
LINK_DATE_FORMAT = "%Y%m%dT%H%M%S"

_WEEKDAY_NAMES = ("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo")
_MONTH_NAMES = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)

UNKNOWN_INTENT_REPLY = "No entendí qué querés hacer. ¿Querés que agende algo?"
MISSING_DATE_REPLY = "❌ No pude entender la fecha/hora del evento."
GENERIC_ERROR_REPLY = "❌ Ocurrió un error procesando tu mensaje. Probá de nuevo en un rato."
START_REPLY = (
    "¡Hola! Soy TuCalendarioBot 🤖\n"
    "Escribime lo que tenés que hacer y cuándo, y lo agendo en el calendario.\n"
    "Por ejemplo: \"recordarme comprar pan el viernes a las 18hs\"."
)
HELP_REPLY = (
    "Mandame un mensaje con la tarea y la fecha/hora:\n"
    "• \"recordarme llamar a Juan mañana a las 10hs\"\n"
    "• \"agendar dentista el martes 9:30\"\n"
    "• \"reunión el jueves a las 7pm\"\n\n"
    "Cada evento dura 30 minutos e incluye un aviso 30 minutos antes."
)


def _encode_component(value: str) -> str:
    return quote(value, safe="-_.!~*'()")


def format_date_es(value: datetime) -> str:
    """'Lunes, 10 de junio de 2024'."""
    weekday = _WEEKDAY_NAMES[value.weekday()]
    month = _MONTH_NAMES[value.month - 1]
    return capitalize_first(f"{weekday}, {value.day} de {month} de {value.year}")


def format_time_es(value: datetime) -> str:
    return value.strftime("%H:%M")


def build_calendar_link(event: CalendarEvent) -> str:
    dates = f"{event.start.strftime(LINK_DATE_FORMAT)}/{event.end.strftime(LINK_DATE_FORMAT)}"
    return (
        f"{GOOGLE_TEMPLATE_URL}?action=TEMPLATE"
        f"&text={_encode_component(event.title)}"
        f"&details={_encode_component(f'Creado por {BOT_NAME}')}"
        f"&dates={dates}"
        f"&ctz={_encode_component(event.timezone)}"
        "&output=mobile"
    )


def format_confirmation(event: CalendarEvent) -> str:
    return (
        f"✅ Evento \"{event.title}\"\n"
        f"📅 Creado para: {format_date_es(event.start)}\n"
        f"🕒 Horario: {format_time_es(event.start)}\n\n"
        "📱 Toca el siguiente enlace para agregar este evento a tu calendario:\n"
        f"{build_calendar_link(event)}\n\n"
        f"⏰ El evento incluye un recordatorio {POPUP_REMINDER_MINUTES} minutos antes."
    )


def format_creation_failed(message: str) -> str:
    return f"❌ Error al crear el evento: {message}"
