"""Built-in policy for a feature-first Flutter project.

Each feature folder under ``lib/features`` holds typed subfolders
(``screens``, ``cubits``, ``use_cases``, ...). Dependencies flow from the UI
down to data sources; business objects may be used everywhere.
"""

from .models import LayerRule, NamingRule, Policy

UI_SCREEN = "UI_SCREEN"
UI_VIEW = "UI_VIEW"
UI_COMPONENT = "UI_COMPONENT"
CUBIT = "CUBIT"
CUBIT_STATE = "CUBIT_STATE"
USE_CASE = "USE_CASE"
REPOSITORY_INTERFACE = "REPOSITORY_INTERFACE"
REPOSITORY_IMPL = "REPOSITORY_IMPL"
SERVICE_INTERFACE = "SERVICE_INTERFACE"
SERVICE_IMPL = "SERVICE_IMPL"
DATA_SOURCE = "DATA_SOURCE"
DTO = "DTO"
BUSINESS_OBJECT = "BUSINESS_OBJECT"

LAYER_NAMES = (
    UI_SCREEN,
    UI_VIEW,
    UI_COMPONENT,
    CUBIT,
    CUBIT_STATE,
    USE_CASE,
    REPOSITORY_INTERFACE,
    REPOSITORY_IMPL,
    SERVICE_INTERFACE,
    SERVICE_IMPL,
    DATA_SOURCE,
    DTO,
    BUSINESS_OBJECT,
)


def _rule(name, folder, suffix="", allowed=(), feature_private=False) -> LayerRule:
    return LayerRule(
        name=name,
        folder=folder,
        naming=NamingRule(suffix=suffix),
        allowed=frozenset(allowed),
        feature_private=feature_private,
    )


def default_layers() -> dict[str, LayerRule]:
    rules = [
        _rule(UI_SCREEN, "screens", "Screen", (UI_VIEW, UI_COMPONENT, CUBIT, CUBIT_STATE)),
        _rule(UI_VIEW, "views", "View", (UI_VIEW, UI_COMPONENT, CUBIT, CUBIT_STATE)),
        _rule(UI_COMPONENT, "components", "", (UI_COMPONENT, CUBIT, CUBIT_STATE)),
        _rule(
            CUBIT,
            "cubits",
            "Cubit",
            (CUBIT_STATE, USE_CASE, REPOSITORY_INTERFACE, SERVICE_INTERFACE),
        ),
        # Cubit states stay inside their feature: only its cubit and UI may see them
        _rule(CUBIT_STATE, "states", "State", (CUBIT_STATE,), feature_private=True),
        _rule(
            USE_CASE,
            "use_cases",
            "UseCase",
            (USE_CASE, REPOSITORY_INTERFACE, REPOSITORY_IMPL, SERVICE_INTERFACE, SERVICE_IMPL),
        ),
        _rule(REPOSITORY_INTERFACE, "repositories/interfaces", "Repository"),
        _rule(
            REPOSITORY_IMPL,
            "repositories",
            "Repository",
            (REPOSITORY_INTERFACE, SERVICE_INTERFACE, SERVICE_IMPL, DATA_SOURCE, DTO),
        ),
        _rule(SERVICE_INTERFACE, "services/interfaces", "Service"),
        _rule(SERVICE_IMPL, "services", "Service", (SERVICE_INTERFACE, DATA_SOURCE, DTO)),
        _rule(DATA_SOURCE, "data_sources", "DataSource", (DTO,)),
        _rule(DTO, "dtos", "DTO", (DTO,)),
        _rule(BUSINESS_OBJECT, "business_objects", "", (BUSINESS_OBJECT,)),
    ]
    return {rule.name: rule for rule in rules}


def default_policy() -> Policy:
    return Policy(layers=default_layers())
