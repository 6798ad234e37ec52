"""
Job-to-contractor match rules.

A job is surfaced to a contractor only when BOTH the location rule and the
skills rule hold. Every comparison is case-insensitive exact equality on
trimmed strings.

Location:
  - contractor has service_areas  -> job location must equal one of them
  - otherwise                     -> job location must equal legacy region_text

Skills:
  - job has required_skills:
      contractor specialties (if any) must share a skill, else
      legacy specialty_tags (if any) must share a skill, else no match
  - job has no required_skills:
      legacy specialty_tags must contain the job's category name
"""
from typing import Any, Iterable, List, Optional, Set
from uuid import UUID


def _normalize(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip().lower()


def _normalized_set(values: Optional[Iterable[str]]) -> Set[str]:
    return {v.strip().lower() for v in (values or []) if v}


def location_matches(job: Any, contractor: Any) -> bool:
    job_location = _normalize(getattr(job, "location_text", None))

    service_areas = _normalized_set(getattr(contractor, "service_areas", None))
    if service_areas:
        return job_location is not None and job_location in service_areas

    region = _normalize(getattr(contractor, "region_text", None))
    if region is None or job_location is None:
        return False
    return region == job_location


def skills_match(job: Any, contractor: Any) -> bool:
    required = _normalized_set(getattr(job, "required_skills", None))
    specialties = _normalized_set(getattr(contractor, "specialties", None))
    legacy_tags = _normalized_set(getattr(contractor, "specialty_tags", None))

    if required:
        if specialties:
            return bool(required & specialties)
        if legacy_tags:
            return bool(required & legacy_tags)
        return False

    category = _normalize(getattr(job, "category_name", None))
    if not category or not legacy_tags:
        return False
    return category in legacy_tags


def matches(job: Any, contractor: Any) -> bool:
    """Should `job` be surfaced to `contractor`?"""
    return location_matches(job, contractor) and skills_match(job, contractor)


def matching_user_ids(job: Any, contractors: Iterable[Any]) -> List[UUID]:
    """User ids of matching contractors, de-duplicated, in input order."""
    seen: Set[UUID] = set()
    user_ids: List[UUID] = []
    for contractor in contractors:
        if not matches(job, contractor):
            continue
        if contractor.user_id in seen:
            continue
        seen.add(contractor.user_id)
        user_ids.append(contractor.user_id)
    return user_ids
