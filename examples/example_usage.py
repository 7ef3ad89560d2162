"""Example: drive the engine through the service layer (no Flask).

Controllers are a thin layer; the occupancy and ratio rules live in services.
"""

import importlib

from config import get_settings_module

from src.ratio_engine.ratio_engine.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, staff_scope=settings.RATIO_STAFF_SCOPE)

    overview = container.ratio_service.get_dashboard_snapshot()
    for snapshot in overview.classrooms:
        print(
            f"{snapshot.classroom_name}: {snapshot.children_count} children / {snapshot.staff_count} staff "
            f"(1:{snapshot.effective_ratio}) -> {snapshot.status.value}"
        )


if __name__ == "__main__":
    main()
