"""Recover merged-cell ranges from the XML parts of a zip-packaged workbook.

The sheet part is found through the workbook's two-step indirection:
``xl/workbook.xml`` maps the sheet's display name to a relationship id, and
``xl/_rels/workbook.xml.rels`` maps that id to the part path. Individual
``<mergeCell ref="...">`` entries that cannot be decoded are skipped; a missing
or unparseable part is an error.
"""

import os
import posixpath
import xml.etree.ElementTree as ET
import zipfile
import zlib
from pathlib import Path

from loguru import logger

from .conf import C_DIR_WORKBOOK, C_PART_WORKBOOK, C_PART_WORKBOOK_RELS
from .errors import (
    ContainerEntryMissingError,
    MalformedContainerError,
    RelationshipNotFoundError,
    SourceOpenError,
)
from .reader import detect_workbook_format
from .service import parse_range_ref
from .spec import EnumWorkbookFormat, SpecMergeRange


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _has_namespace(tag: str) -> bool:
    return tag.startswith("{")


################################################################################
# #region PartLookup


def _read_xml_part(zf: zipfile.ZipFile, entry: str, *, path: Path) -> ET.Element:
    try:
        v_xml = zf.read(entry)
    except KeyError as exc:
        raise ContainerEntryMissingError(
            "The workbook container lacks a required part", path=path, entry=entry
        ) from exc
    except (zipfile.BadZipFile, zlib.error, EOFError) as exc:
        raise MalformedContainerError(
            f"Cannot decompress a container part: {exc}", path=path, entry=entry
        ) from exc

    try:
        return ET.fromstring(v_xml)
    except ET.ParseError as exc:
        raise MalformedContainerError(
            f"Cannot parse a container part: {exc}", path=path, entry=entry
        ) from exc


def find_sheet_rel_id(root_workbook: ET.Element, sheet_name: str) -> str | None:
    """Relationship id (``r:id``) of the ``<sheet>`` whose ``name`` is ``sheet_name``."""
    for _elem in root_workbook.iter():
        if _local_name(_elem.tag) != "sheet":
            continue
        c_name: str | None = None
        c_rel_id: str | None = None
        for _key, _val in _elem.attrib.items():
            c_key_local = _local_name(_key)
            if c_key_local == "name" and not _has_namespace(_key):
                c_name = _val
            elif c_key_local == "id" and _has_namespace(_key):
                c_rel_id = _val
        if c_name == sheet_name and c_rel_id is not None:
            return c_rel_id
    return None


def find_rel_target(root_rels: ET.Element, rel_id: str) -> str | None:
    """``Target`` of the ``<Relationship>`` whose ``Id`` is ``rel_id``."""
    for _elem in root_rels.iter():
        if _local_name(_elem.tag) != "Relationship":
            continue
        if _elem.attrib.get("Id") == rel_id and _elem.attrib.get("Target"):
            return _elem.attrib["Target"]
    return None


def resolve_part_path(target: str) -> str:
    """
    Resolve a workbook relationship target to an archive entry name.

    Examples:
        >>> resolve_part_path("worksheets/sheet1.xml")
        'xl/worksheets/sheet1.xml'
        >>> resolve_part_path("/xl/worksheets/sheet1.xml")
        'xl/worksheets/sheet1.xml'
    """
    c_target = target.replace("\\", "/").strip()
    if c_target.startswith("/"):
        return posixpath.normpath(c_target.lstrip("/"))
    return posixpath.normpath(posixpath.join(C_DIR_WORKBOOK, c_target))


# #endregion
################################################################################
# #region MergeParsing


def parse_merge_cells(root_sheet: ET.Element) -> list[SpecMergeRange]:
    """Decode every ``<mergeCell ref>`` of a sheet part, skipping bad references."""
    l_ranges: list[SpecMergeRange] = []
    for _elem in root_sheet.iter():
        if _local_name(_elem.tag) != "mergeCell":
            continue
        c_ref = _elem.attrib.get("ref")
        if c_ref is None:
            continue
        cls_range = parse_range_ref(c_ref.strip())
        if cls_range is None:
            logger.debug(f"Skipping undecodable merge reference: {c_ref!r}")
            continue
        l_ranges.append(cls_range)
    return l_ranges


# #endregion
################################################################################
# #region Public


def extract_merge_ranges(
    path: os.PathLike[str] | str,
    sheet_name: str,
    *,
    fmt: EnumWorkbookFormat | None = None,
) -> list[SpecMergeRange]:
    """
    Return the merged ranges declared for ``sheet_name``.

    Only the zip-packaged format carries recoverable merge declarations; any
    other format yields an empty list.

    Args:
        path: Source workbook.
        sheet_name: Display name of the sheet, as listed in the workbook.
        fmt: Container format if already known; detected otherwise.

    Returns:
        list[SpecMergeRange]: Zero-based inclusive ranges in document order.

    Raises:
        SourceOpenError: The file cannot be opened.
        ContainerEntryMissingError: A required part is absent.
        MalformedContainerError: The archive or one of its parts is unreadable.
        RelationshipNotFoundError: The sheet or its relationship is not declared.
    """
    path = Path(path)
    if fmt is None:
        fmt = detect_workbook_format(path)
    if fmt is not EnumWorkbookFormat.XLSX:
        logger.warning(f"Merged cells are not recovered from {fmt} sources ({path.name})")
        return []

    try:
        zf = zipfile.ZipFile(path)
    except zipfile.BadZipFile as exc:
        raise MalformedContainerError(
            f"Cannot open the workbook as a zip container: {exc}", path=path
        ) from exc
    except OSError as exc:
        raise SourceOpenError(
            f"Cannot open the source file: {exc.strerror or exc}", path=path
        ) from exc

    with zf:
        root_workbook = _read_xml_part(zf, C_PART_WORKBOOK, path=path)
        c_rel_id = find_sheet_rel_id(root_workbook, sheet_name)
        if c_rel_id is None:
            raise RelationshipNotFoundError(
                "The sheet has no relationship id in the workbook part",
                path=path,
                sheet_name=sheet_name,
                entry=C_PART_WORKBOOK,
            )

        root_rels = _read_xml_part(zf, C_PART_WORKBOOK_RELS, path=path)
        c_target = find_rel_target(root_rels, c_rel_id)
        if c_target is None:
            raise RelationshipNotFoundError(
                f"Relationship {c_rel_id!r} has no target part",
                path=path,
                sheet_name=sheet_name,
                entry=C_PART_WORKBOOK_RELS,
            )

        root_sheet = _read_xml_part(zf, resolve_part_path(c_target), path=path)

    l_ranges = parse_merge_cells(root_sheet)
    logger.debug(f"Found {len(l_ranges)} merged range(s) in sheet {sheet_name!r}")
    return l_ranges


# #endregion
################################################################################
