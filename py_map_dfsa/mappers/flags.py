# Copyright 2025 Gowtham Rao <rao@ohdsi.org>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Derives the condition flags that control which sections a document has.

The business rules are kept as a table of ``FlagRule`` entries, one per flag,
so that each rule can be listed, documented and tested on its own.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from py_map_dfsa.mappers.fields import is_true
from py_map_dfsa.models.document import ConditionFlags
from py_map_dfsa.models.raw import AuthorisedIndividualRecord
from py_map_dfsa.picklists.enums import normalize_code

logger = logging.getLogger(__name__)

# Option-set value of "Less than 3 years" on the residence duration question.
RESIDENCE_LESS_THAN_3_YEARS = 612320000


@dataclass(frozen=True)
class FlagRule:
    """A named predicate over the raw record.

    Attributes:
        name: The ConditionFlags field the rule populates.
        predicate: Pure function of the record returning the flag value.
        fields: The record fields the predicate reads.
    """

    name: str
    predicate: Callable[[AuthorisedIndividualRecord], bool]
    fields: tuple[str, ...]


def _has_items(items: Sequence | None) -> bool:
    return bool(items)


FLAG_RULES: tuple[FlagRule, ...] = (
    FlagRule(
        "rep_office",
        lambda r: is_true(r.applying_for_rep_office),
        ("applying_for_rep_office",),
    ),
    FlagRule(
        "previously_held",
        lambda r: is_true(r.previously_held_ai_status),
        ("previously_held_ai_status",),
    ),
    FlagRule(
        "other_names",
        lambda r: is_true(r.has_used_other_names),
        ("has_used_other_names",),
    ),
    FlagRule(
        "residence_duration_less_than_3_years",
        lambda r: normalize_code(r.residence_duration) == RESIDENCE_LESS_THAN_3_YEARS,
        ("residence_duration",),
    ),
    FlagRule(
        "has_start_date",
        lambda r: is_true(r.has_proposed_start_date),
        ("has_proposed_start_date",),
    ),
    FlagRule(
        "has_regulatory_history",
        lambda r: is_true(r.holds_regulatory_licence),
        ("holds_regulatory_licence",),
    ),
    FlagRule(
        "licensed_function_selected",
        lambda r: normalize_code(r.licensed_function) is not None,
        ("licensed_function",),
    ),
    FlagRule(
        "has_career_history",
        lambda r: _has_items(r.career_history),
        ("career_history",),
    ),
    FlagRule(
        "has_higher_education",
        lambda r: _has_items(r.higher_education),
        ("higher_education",),
    ),
    FlagRule(
        "has_professional_qualifications",
        lambda r: _has_items(r.professional_qualifications),
        ("professional_qualifications",),
    ),
    FlagRule(
        "has_other_qualifications",
        lambda r: _has_items(r.other_qualifications),
        ("other_qualifications",),
    ),
    FlagRule(
        "has_professional_memberships",
        lambda r: _has_items(r.professional_memberships),
        ("professional_memberships",),
    ),
    FlagRule(
        "has_difc_experience",
        lambda r: is_true(r.worked_in_difc),
        ("worked_in_difc",),
    ),
    FlagRule(
        "has_similar_role_experience",
        lambda r: is_true(r.worked_in_similar_role),
        ("worked_in_similar_role",),
    ),
    FlagRule(
        "has_other_holdings",
        lambda r: _has_items(r.other_holdings),
        ("other_holdings",),
    ),
)


def derive_flags(record: AuthorisedIndividualRecord) -> ConditionFlags:
    """Evaluates every rule in FLAG_RULES against the record.

    Missing fields make a flag False; this function never raises for record
    content.
    """
    values = {rule.name: rule.predicate(record) for rule in FLAG_RULES}
    flags = ConditionFlags(**values)
    logger.debug("Condition flags for record %s: %s", record.record_id, values)
    return flags
