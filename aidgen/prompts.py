"""
Prompt assembly for the recipe generator.

The system prompt is constant. The user prompt lists the coffee details the
caller supplied, one "<Label>: <value>" line per field, always in the order
of FIELD_LABELS.
"""
from typing import Any, List, Tuple

from .schemas import ChatMessage, RecipeRequest

# (request key, RecipeRequest attribute, label), in prompt order
FIELD_LABELS: List[Tuple[str, str, str]] = [
    ("name", "name", "Name"),
    ("roast", "roast", "Roast profile"),
    ("origin", "origin", "Origin"),
    ("process", "process", "Processing method"),
    ("varietal", "varietal", "Varietal"),
    ("masl", "masl", "MASL"),
    ("roastDate", "roast_date", "Roast date"),
    ("brewProfile", "brew_profile", "Brew profile"),
]

SYSTEM_PROMPT = (
    "You are AidGen, a recipe generator for the Fellow Aiden coffee machine.\n"
    "Your task is to generate precise coffee brewing recipes based on user inputs.\n\n"
    "The user will provide some or all of the following fields: Name, Roast profile, Origin, "
    "Processing method, Varietal, MASL, Roast date, Brew profile.\n"
    "If any fields are blank, ignore them.\n\n"
    "Output as an HTML block containing ONLY tables. Each table must be dark mode styled "
    "and readable when injected directly into the page.\n\n"
    "Tables Required:\n"
    "1. Aiden Recipe Table (Temperature, Coffee-to-Water Ratio, Bloom Ratio, Bloom Time, Bloom Temperature).\n"
    "2. Single Serve Recipe Table (Pulse #, Pulse Temp, Time Until Next Pulse).\n"
    "3. Batch Recipe Table (Pulse #, Pulse Temp, Time Until Next Pulse).\n\n"
    "Rules:\n"
    "- All values must fall within specified ranges.\n"
    "- Be precise & realistic for the Fellow Aiden brewer.\n"
    "- Do not output text outside of tables."
)


def render_value(value: Any) -> str:
    """Render a JSON value the way a browser template string would."""
    if value is True:
        return "true"
    if value is False:
        return "false"
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ",".join(render_value(v) for v in value)
    return str(value)


def is_present(value: Any) -> bool:
    """Falsy values (None, "", 0, False) and whitespace-only strings are absent."""
    if not value:
        return False
    return render_value(value).strip() != ""


def present_fields(recipe: RecipeRequest) -> List[str]:
    """Request keys of the fields that will appear in the prompt."""
    return [key for key, attr, _ in FIELD_LABELS if is_present(getattr(recipe, attr))]


def build_user_message(recipe: RecipeRequest) -> str:
    lines = []
    for _, attr, label in FIELD_LABELS:
        value = getattr(recipe, attr)
        if is_present(value):
            lines.append(f"{label}: {render_value(value)}")
    return "\n".join(lines)


def build_messages(recipe: RecipeRequest) -> List[ChatMessage]:
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(role="user", content=build_user_message(recipe)),
    ]
