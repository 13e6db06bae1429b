"""
XML Parser

Parses XML files with tolerant element discovery:
- <exercise>/<workout> elements anywhere in the document, with or without
  an <exercises>/<workouts> container
- Otherwise the root's children, when they look like records
- Fields as child elements or attributes, under several accepted names,
  compared case-insensitively (namespaces ignored)
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Callable, Dict, Iterable, List, Optional

from workout_import_api.utils import to_float, to_int

from .base import BaseParser, muscle_groups_or_default, split_muscle_groups
from .models import FileFormat, ParseResult

logger = logging.getLogger(__name__)


# Accepted tag/attribute names per logical field, highest priority first
EXERCISE_NAME_ALIASES = ('name', 'exerciseName', 'exercise_name')
CATEGORY_ALIASES = ('category',)
MUSCLE_GROUP_ALIASES = ('muscleGroup', 'muscleGroups', 'muscle_group', 'muscles', 'muscle')
NOTES_ALIASES = ('notes', 'note', 'description')
WORKOUT_NAME_ALIASES = ('name', 'workoutName', 'workout_name')
DATE_ALIASES = ('date', 'workoutDate', 'workout_date')
ORDER_ALIASES = ('order', 'position')
SET_NUMBER_ALIASES = ('setNumber', 'number', 'set_number')
REPS_ALIASES = ('reps', 'repetitions')
WEIGHT_ALIASES = ('weight',)
DURATION_ALIASES = ('duration', 'time')
DISTANCE_ALIASES = ('distance',)
SET_NOTES_ALIASES = ('notes', 'note')

EXERCISE_TAGS = {'exercise'}
WORKOUT_TAGS = {'workout'}
WORKOUT_EXERCISE_CONTAINER_TAGS = {'exercises', 'workoutexercises'}
WORKOUT_EXERCISE_TAGS = {'exercise', 'workoutexercise'}
SET_CONTAINER_TAGS = {'sets'}
SET_TAGS = {'set'}
MUSCLE_GROUP_TAGS = {alias.lower() for alias in MUSCLE_GROUP_ALIASES}


def local_name(tag: Any) -> str:
    """'{urn:x}MuscleGroup' -> 'musclegroup'; comments and PIs -> ''"""
    if not isinstance(tag, str):
        return ''
    return tag.rsplit('}', 1)[-1].lower()


def child_elements(element: ET.Element, tags: Optional[Iterable[str]] = None) -> List[ET.Element]:
    """Direct child elements, optionally restricted to some (lower-cased) tag names"""
    children = [child for child in element if isinstance(child.tag, str)]
    if tags is None:
        return children
    return [child for child in children if local_name(child.tag) in tags]


def find_text(element: ET.Element, aliases: Iterable[str]) -> Optional[str]:
    """
    Look up a scalar field on an element.

    For each alias in priority order, a direct child element with text wins,
    then an attribute of the same name. Returns the stripped text or None.
    """
    for alias in aliases:
        wanted = alias.lower()

        for child in child_elements(element, {wanted}):
            text = ''.join(child.itertext()).strip()
            if text:
                return text

        for key, value in element.attrib.items():
            if local_name(key) == wanted and value.strip():
                return value.strip()

    return None


def nested_elements(
    element: ET.Element,
    container_tags: Iterable[str],
    item_tags: Iterable[str],
) -> List[ET.Element]:
    """Items found inside container children, or directly under element"""
    containers = child_elements(element, container_tags)
    if containers:
        return [item for container in containers for item in child_elements(container, item_tags)]
    return child_elements(element, item_tags)


class XMLParser(BaseParser):
    """Parser for XML files"""

    file_format = FileFormat.XML

    def parse_exercises(self, text: str) -> ParseResult:
        return self._parse_records(
            text,
            label='Exercise',
            record_tags=EXERCISE_TAGS,
            looks_like_record=self._has_exercise_fields,
            shape_hint='<exercise> elements or records with name and category fields',
            build=self._exercise_candidate,
            accept=self.accept_exercise,
        )

    def parse_workouts(self, text: str) -> ParseResult:
        return self._parse_records(
            text,
            label='Workout',
            record_tags=WORKOUT_TAGS,
            looks_like_record=self._has_workout_fields,
            shape_hint='<workout> elements or records with name and date fields',
            build=self._workout_candidate,
            accept=self.accept_workout,
        )

    def _parse_records(
        self,
        text: str,
        label: str,
        record_tags: Iterable[str],
        looks_like_record: Callable[[ET.Element], bool],
        shape_hint: str,
        build: Callable[[ET.Element], Dict[str, Any]],
        accept: Callable[..., bool],
    ) -> ParseResult:
        try:
            root = ET.fromstring(text)
        except ET.ParseError as e:
            return self.failure(f"XML parsing error: {e}")

        elements = [el for el in root.iter() if local_name(el.tag) in record_tags]

        if not elements:
            children = child_elements(root)
            if not children:
                return self.failure(f"No {label.lower()} elements found in XML")
            if not looks_like_record(children[0]):
                return self.failure(f"Invalid XML structure: expected {shape_hint}")
            elements = children

        for index, element in enumerate(elements):
            prefix = f"{label} {index + 1}: "
            try:
                candidate = build(element)
            except Exception as e:
                logger.exception(f"Unexpected error in XML {label.lower()} {index + 1}")
                self.add_error(f"{prefix}Failed to parse - {e}")
                continue
            accept(candidate, prefix=prefix)

        return self.result()

    def _has_exercise_fields(self, element: ET.Element) -> bool:
        return (
            find_text(element, EXERCISE_NAME_ALIASES) is not None
            and find_text(element, CATEGORY_ALIASES) is not None
        )

    def _has_workout_fields(self, element: ET.Element) -> bool:
        return (
            find_text(element, WORKOUT_NAME_ALIASES) is not None
            and find_text(element, DATE_ALIASES) is not None
        )

    def _exercise_candidate(self, element: ET.Element) -> Dict[str, Any]:
        # Repeated <muscleGroup> elements (optionally in a container) or one delimited node
        muscle_groups: List[str] = []
        for el in element.iter():
            if el is not element and local_name(el.tag) in MUSCLE_GROUP_TAGS:
                muscle_groups.extend(split_muscle_groups(el.text))
        if not muscle_groups:
            muscle_groups = split_muscle_groups(find_text(element, MUSCLE_GROUP_ALIASES))

        return {
            'name': find_text(element, EXERCISE_NAME_ALIASES) or '',
            'category': find_text(element, CATEGORY_ALIASES) or '',
            'muscleGroup': muscle_groups_or_default(muscle_groups),
            'notes': find_text(element, NOTES_ALIASES),
        }

    def _workout_candidate(self, element: ET.Element) -> Dict[str, Any]:
        exercise_elements = nested_elements(
            element, WORKOUT_EXERCISE_CONTAINER_TAGS, WORKOUT_EXERCISE_TAGS
        )
        return {
            'name': find_text(element, WORKOUT_NAME_ALIASES) or '',
            'date': find_text(element, DATE_ALIASES) or '',
            'notes': find_text(element, NOTES_ALIASES),
            'exercises': [
                self._workout_exercise_candidate(el, index)
                for index, el in enumerate(exercise_elements)
            ],
        }

    def _workout_exercise_candidate(self, element: ET.Element, default_order: int) -> Dict[str, Any]:
        order = to_int(find_text(element, ORDER_ALIASES))
        set_elements = nested_elements(element, SET_CONTAINER_TAGS, SET_TAGS)
        return {
            'exerciseName': find_text(element, EXERCISE_NAME_ALIASES) or '',
            'order': order if order is not None else default_order,
            'sets': [
                self._set_candidate(el, index + 1)
                for index, el in enumerate(set_elements)
            ],
        }

    def _set_candidate(self, element: ET.Element, default_number: int) -> Dict[str, Any]:
        set_number = to_int(find_text(element, SET_NUMBER_ALIASES))
        return {
            'setNumber': set_number if set_number is not None else default_number,
            'reps': to_int(find_text(element, REPS_ALIASES)),
            'weight': to_float(find_text(element, WEIGHT_ALIASES)),
            'duration': to_int(find_text(element, DURATION_ALIASES)),
            'distance': to_float(find_text(element, DISTANCE_ALIASES)),
            'notes': find_text(element, SET_NOTES_ALIASES),
        }
