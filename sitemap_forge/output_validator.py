"""
Structural checking of rendered sitemap documents using lxml.
"""

import time
from pathlib import Path
from typing import Optional

import structlog
from lxml import etree

from .types import MAX_SITEMAP_ITEMS, SITEMAP_NAMESPACE, ValidationResult
from .validator import VALID_FREQUENCIES


logger = structlog.get_logger(__name__)

_ENTRY_TAGS = {"urlset": "url", "sitemapindex": "sitemap"}


def _qualified(local_name: str) -> str:
    return f"{{{SITEMAP_NAMESPACE}}}{local_name}"


class OutputValidator:
    """
    Checks that a rendered sitemap or sitemap index is well-formed and follows
    the sitemaps.org structure.

    This inspects output only; record-level rules live in ``DataValidator``.
    """

    def __init__(self, max_entries: int = MAX_SITEMAP_ITEMS):
        self.max_entries = max_entries
        self.logger = logger.bind(component="OutputValidator")
        self._parser = etree.XMLParser(strip_cdata=False, resolve_entities=False, no_network=True)
        self._validation_stats = {
            "total_validations": 0,
            "successful_validations": 0,
            "failed_validations": 0,
        }

    def validate_xml_string(self, xml_content: str) -> ValidationResult:
        """
        Validate rendered XML content.

        Args:
            xml_content: XML content as string

        Returns:
            Validation result with detailed error information
        """
        start_time = time.time()

        try:
            root = etree.fromstring(xml_content.encode("utf-8"), self._parser)
        except etree.XMLSyntaxError as e:
            return self._create_parse_error_result(e, time.time() - start_time)

        result = ValidationResult(is_valid=True)
        self._check_structure(root, result)
        result.validation_time = time.time() - start_time

        self._update_validation_stats(result)

        self.logger.debug("Sitemap output check completed",
                          is_valid=result.is_valid,
                          errors=len(result.errors),
                          warnings=len(result.warnings))

        return result

    def validate_xml_file(self, xml_path: Path) -> ValidationResult:
        """Validate an XML file on disk."""
        try:
            xml_content = Path(xml_path).read_text(encoding="utf-8")
        except OSError as e:
            self.logger.error("Error reading XML file", path=str(xml_path), error=str(e))
            result = ValidationResult(is_valid=False)
            result.add_error(f"Failed to read XML file: {e}")
            return result

        return self.validate_xml_string(xml_content)

    def _create_parse_error_result(self, parse_error: etree.XMLSyntaxError,
                                   validation_time: float) -> ValidationResult:
        result = ValidationResult(is_valid=False)
        result.add_error(
            message=f"XML parsing error: {parse_error.msg}",
            line=parse_error.lineno,
            column=parse_error.offset
        )
        result.validation_time = validation_time
        self._update_validation_stats(result)

        self.logger.warning("XML parse error",
                            message=parse_error.msg,
                            line=parse_error.lineno,
                            column=parse_error.offset)

        return result

    def _check_structure(self, root: etree._Element, result: ValidationResult) -> None:
        qname = etree.QName(root)

        if qname.namespace != SITEMAP_NAMESPACE or qname.localname not in _ENTRY_TAGS:
            result.add_error(
                f"Root element must be urlset or sitemapindex in {SITEMAP_NAMESPACE}, got {root.tag}",
                line=root.sourceline
            )
            return

        entry_tag = _ENTRY_TAGS[qname.localname]
        entries = root.findall(_qualified(entry_tag))
        result.entry_count = len(entries)

        for index, entry in enumerate(entries):
            locs = entry.findall(_qualified("loc"))
            if len(locs) != 1:
                result.add_error(
                    f"{entry_tag}[{index}] must contain exactly one loc, found {len(locs)}",
                    line=entry.sourceline
                )
            elif not (locs[0].text or "").strip():
                result.add_error(f"{entry_tag}[{index}] has an empty loc", line=locs[0].sourceline)

            self._check_priority(entry, entry_tag, index, result)
            self._check_changefreq(entry, entry_tag, index, result)

        if len(entries) > self.max_entries:
            result.add_warning(
                f"Document has {len(entries)} entries, more than the recommended {self.max_entries}"
            )

    def _check_priority(self, entry: etree._Element, entry_tag: str, index: int,
                        result: ValidationResult) -> None:
        priority: Optional[etree._Element] = entry.find(_qualified("priority"))
        if priority is None:
            return

        try:
            value = float(priority.text or "")
        except ValueError:
            result.add_error(
                f"Invalid priority format in {entry_tag}[{index}]: {priority.text}",
                line=priority.sourceline
            )
            return

        if not 0.0 <= value <= 1.0:
            result.add_warning(
                f"Priority {value} out of range [0.0, 1.0] in {entry_tag}[{index}]",
                line=priority.sourceline
            )

    def _check_changefreq(self, entry: etree._Element, entry_tag: str, index: int,
                          result: ValidationResult) -> None:
        changefreq = entry.find(_qualified("changefreq"))
        if changefreq is not None and changefreq.text not in VALID_FREQUENCIES:
            result.add_error(
                f"Invalid changefreq in {entry_tag}[{index}]: {changefreq.text}",
                line=changefreq.sourceline
            )

    def _update_validation_stats(self, result: ValidationResult) -> None:
        self._validation_stats["total_validations"] += 1

        if result.is_valid:
            self._validation_stats["successful_validations"] += 1
        else:
            self._validation_stats["failed_validations"] += 1

    def get_validation_stats(self) -> dict:
        return self._validation_stats.copy()
