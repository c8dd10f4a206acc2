import logging
from time import perf_counter

from fastapi import APIRouter, Depends

from lecture_scheduler.api.deps import get_scheduling_policy
from lecture_scheduler.core.exceptions import CatalogValidationError
from lecture_scheduler.schemas.catalog import CatalogSnapshot
from lecture_scheduler.schemas.conflict import ConflictReport
from lecture_scheduler.schemas.timetable import (
    AuditTimetableRequest,
    CatalogValidationResult,
    GeneratedTimetable,
    GenerateTimetableRequest,
)
from lecture_scheduler.services.conflict_service import ConflictService
from lecture_scheduler.services.generator import TimetableGenerator, validate_catalog
from lecture_scheduler.services.policy import SchedulingPolicy

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/timetable/validate", response_model=CatalogValidationResult)
def validate_timetable_catalog(catalog: CatalogSnapshot) -> CatalogValidationResult:
    return validate_catalog(catalog)


@router.post("/timetable/generate", response_model=GeneratedTimetable)
def generate_timetable(
    payload: GenerateTimetableRequest,
    policy: SchedulingPolicy = Depends(get_scheduling_policy),
) -> GeneratedTimetable:
    started = perf_counter()
    logger.info(
        "TIMETABLE GENERATION REQUEST | division_id=%s | generated_by=%s | strict=%s",
        payload.division_id,
        payload.generated_by,
        payload.strict,
    )
    if payload.strict:
        validation = validate_catalog(payload.catalog)
        if not validation.is_valid:
            raise CatalogValidationError(validation.errors)

    generator = TimetableGenerator(payload.catalog, policy=policy)
    timetable = generator.generate(payload.division_id, generated_by=payload.generated_by)
    logger.info(
        "TIMETABLE GENERATION RESPONSE | division_id=%s | complete=%s | duration_ms=%.1f",
        payload.division_id,
        timetable.is_complete,
        (perf_counter() - started) * 1000,
    )
    return timetable


@router.post("/timetable/audit", response_model=ConflictReport)
def audit_timetable(
    payload: AuditTimetableRequest,
    policy: SchedulingPolicy = Depends(get_scheduling_policy),
) -> ConflictReport:
    service = ConflictService(payload.catalog, policy=policy)
    return service.detect_conflicts(payload.timetable)
