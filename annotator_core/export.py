"""
Export and import of bounding box annotations as JSON or pickle files.

The exported file is named after the last part of the opened folder and placed
in the export folder. Importing always creates fresh tool data, existing data is
never changed by a failed import.
"""

import json
import os
import pickle
from typing import Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, NonNegativeInt, ValidationError, field_validator, model_validator

from annotator_core.annotations import BboxAnnotations, BboxToolData, LabelTable
from annotator_core.config import Config
from annotator_core.errors import ImportDataError, LabelConflictError
from annotator_core.geometry import BB
from annotator_core.logging import log_info, log_error


class BboxExportData(BaseModel):
    """Label table and boxes with category indices per file."""

    labels: List[str]
    colors: List[List[int]]
    cat_ids: List[int]
    annotations: Dict[str, Tuple[List[BB], List[NonNegativeInt]]]

    @field_validator("colors")
    @classmethod
    def validate_colors(cls, colors: List[List[int]]) -> List[List[int]]:
        for color in colors:
            if len(color) != 3 or any(c < 0 or c > 255 for c in color):
                raise ValueError(f"invalid rgb color {color}")
        return colors

    @model_validator(mode="after")
    def validate_alignment(self) -> "BboxExportData":
        if not (len(self.labels) == len(self.colors) == len(self.cat_ids)):
            raise ValueError(
                f"labels, colors and cat ids differ in length, "
                f"{len(self.labels)}, {len(self.colors)}, {len(self.cat_ids)}"
            )
        for file_path, (bbs, cat_idxs) in self.annotations.items():
            if len(bbs) != len(cat_idxs):
                raise ValueError(f"boxes and category indices of '{file_path}' differ in length")
        return self

    @classmethod
    def from_bbox_data(cls, bbox_data: BboxToolData) -> "BboxExportData":
        return cls(
            labels=list(bbox_data.labels),
            colors=[list(c) for c in bbox_data.colors],
            cat_ids=list(bbox_data.cat_ids),
            annotations={
                file_path: annos.to_data() for file_path, annos in bbox_data.anno_items()
            },
        )

    def to_bbox_data(self) -> BboxToolData:
        """
        Create new tool data from the export.

        Raises:
            ImportDataError: On an empty or conflicting label table or on
                annotations with a category index out of bounds
        """
        if not self.labels:
            raise ImportDataError("import does not contain any label")
        label_table = LabelTable()
        try:
            for label, color, cat_id in zip(self.labels, self.colors, self.cat_ids):
                label_table.push(label, color, cat_id)
        except LabelConflictError as e:
            raise ImportDataError(f"invalid label table, {e}") from e
        bbox_data = BboxToolData(label_table)
        bbox_data.set_annotations_map(
            {
                file_path: BboxAnnotations.from_bbs_cats(bbs, cat_idxs)
                for file_path, (bbs, cat_idxs) in self.annotations.items()
            }
        )
        return bbox_data


class ExportData(BaseModel):
    """Content of an export file."""

    opened_folder: str
    bbox_data: Optional[BboxExportData] = None


def get_last_part_of_path(path: str, sep: str) -> Optional[str]:
    """
    Last non-empty part of a path, None if ``sep`` does not occur.

    Enclosing quotes are kept around the result.
    """
    if sep not in path:
        return None
    mark = ""
    if len(path) > 1 and path[0] == path[-1] and path[0] in ("'", '"'):
        mark = path[0]
    stripped = path[len(mark):len(path) - len(mark)]
    last_part = stripped.rstrip(sep).split(sep)[-1]
    return f"{mark}{last_part}{mark}"


def export_file_path(opened_folder: str, export_folder: str, extension: str) -> str:
    last_part_linux = get_last_part_of_path(opened_folder, "/")
    last_part_windows = get_last_part_of_path(last_part_linux or opened_folder, "\\")
    last_part = last_part_windows or last_part_linux or opened_folder
    return os.path.join(export_folder, f"{last_part}.{extension}")


def _write(
    bbox_data: BboxToolData,
    opened_folder: str,
    export_folder: Optional[str],
    extension: str,
    serialize: Callable[[ExportData, str], None],
) -> str:
    export_folder = export_folder or Config.get_export_folder()
    os.makedirs(export_folder, exist_ok=True)
    data = ExportData(
        opened_folder=opened_folder, bbox_data=BboxExportData.from_bbox_data(bbox_data)
    )
    path = export_file_path(opened_folder, export_folder, extension)
    try:
        serialize(data, path)
    except OSError as e:
        log_error(f"could not export labels to {path}: {e}")
        raise
    log_info(f"exported labels to {path}", file_path=path)
    return path


def write_json(
    bbox_data: BboxToolData, opened_folder: str, export_folder: Optional[str] = None
) -> str:
    """Export to ``<export_folder>/<last part of opened_folder>.json``."""

    def serialize(data: ExportData, path: str):
        with open(path, "w", encoding="utf-8") as f:
            f.write(data.model_dump_json())

    return _write(bbox_data, opened_folder, export_folder, "json", serialize)


def write_pickle(
    bbox_data: BboxToolData, opened_folder: str, export_folder: Optional[str] = None
) -> str:
    """Export to ``<export_folder>/<last part of opened_folder>.pickle``."""

    def serialize(data: ExportData, path: str):
        with open(path, "wb") as f:
            pickle.dump(data.model_dump(mode="json"), f)

    return _write(bbox_data, opened_folder, export_folder, "pickle", serialize)


def _convert_read(read: ExportData, path: str) -> BboxToolData:
    if read.bbox_data is None:
        raise ImportDataError(f"{path} does not contain bbox data")
    try:
        return read.bbox_data.to_bbox_data()
    except ValidationError as e:
        raise ImportDataError(f"invalid annotations in {path}, {e}") from e


def read_export_json(path: str) -> ExportData:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return ExportData.model_validate(json.load(f))
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
        log_error(f"could not import {path}: {e}")
        raise ImportDataError(f"could not import {path}, {e}") from e


def read_export_pickle(path: str) -> ExportData:
    try:
        with open(path, "rb") as f:
            return ExportData.model_validate(pickle.load(f))
    except (
        pickle.UnpicklingError,
        EOFError,
        ValueError,
        TypeError,
        AttributeError,
        ImportError,
        IndexError,
    ) as e:
        log_error(f"could not import {path}: {e}")
        raise ImportDataError(f"could not import {path}, {e}") from e


def read_json(path: str) -> BboxToolData:
    """
    Import bbox tool data from a JSON export.

    Raises:
        FileNotFoundError: If there is no such file
        ImportDataError: If the content is malformed
    """
    read = read_export_json(path)
    try:
        return _convert_read(read, path)
    except ImportDataError as e:
        log_error(f"could not import {path}: {e}")
        raise


def read_pickle(path: str) -> BboxToolData:
    """Import bbox tool data from a pickle export. Raises like ``read_json``."""
    read = read_export_pickle(path)
    try:
        return _convert_read(read, path)
    except ImportDataError as e:
        log_error(f"could not import {path}: {e}")
        raise
