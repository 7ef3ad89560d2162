from __future__ import annotations

from dataclasses import dataclass

from .children.mysql_child_repository import MySQLChildRepository
from .classrooms.mysql_classroom_repository import MySQLClassroomRepository
from .core.constants import DEFAULT_STAFF_SCOPE
from .core.enums import StaffScope
from .database.connection import DBConfig, DatabaseConnection
from .occupancy.mysql_occupancy_repository import MySQLOccupancyRepository
from .occupancy.service import OccupancyService
from .ratios.service import RatioService
from .staff.mysql_staff_repository import MySQLStaffRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    classrooms_repo: MySQLClassroomRepository
    children_repo: MySQLChildRepository
    staff_repo: MySQLStaffRepository
    occupancy_repo: MySQLOccupancyRepository

    occupancy_service: OccupancyService
    ratio_service: RatioService


def build_container(*, db_config: dict, staff_scope: str = DEFAULT_STAFF_SCOPE) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    classrooms_repo = MySQLClassroomRepository(conn)
    children_repo = MySQLChildRepository(conn)
    staff_repo = MySQLStaffRepository(conn)
    occupancy_repo = MySQLOccupancyRepository(conn)

    occupancy_service = OccupancyService(occupancy_repo, classrooms_repo, children_repo, staff_repo)
    ratio_service = RatioService(
        classrooms_repo,
        children_repo,
        occupancy_repo,
        staff_scope=StaffScope(str(staff_scope).lower()),
    )

    return Container(
        conn=conn,
        classrooms_repo=classrooms_repo,
        children_repo=children_repo,
        staff_repo=staff_repo,
        occupancy_repo=occupancy_repo,
        occupancy_service=occupancy_service,
        ratio_service=ratio_service,
    )
