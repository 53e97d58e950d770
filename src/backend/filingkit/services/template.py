"""
Cover-sheet template filling.

The .docx template carries sample values from a real filing. Each extracted
field replaces its sample value in word/document.xml through run-safe
substitution, so the template's styling stays intact.
"""

import io
import logging
import re
import zipfile
from dataclasses import dataclass
from datetime import date
from typing import Optional

from filingkit.models.document import DocumentInfo
from filingkit.services.substitution import replace_in_document_xml
from filingkit.utils.era import format_reiwa_date, format_reiwa_month
from filingkit.utils.text import to_full_width_digits

logger = logging.getLogger(__name__)

DOCUMENT_XML = 'word/document.xml'
IDEOGRAPHIC_SPACE = '　'


@dataclass(frozen=True)
class TemplatePlaceholders:
    """Sample values baked into the cover-sheet template (search strings)."""
    court_name: str = '神戸地方裁判所尼崎支部第２民事部'
    court_fax: str = '06-6438-1710'
    court_fax_full_width: str = '０６―６４３８－１７１０'
    plaintiff_lawyer: str = '四方久寛'
    plaintiff_lawyer_fax: str = '06-4708-3638'
    cover_date: str = '令和6年11月7日'
    receipt_month: str = '令和6年9月'
    case_number: str = '令和３年（ワ）第８００号'
    case_name: str = '損害賠償請求事件'
    plaintiff_name: str = '木村治紀'
    defendant_name: str = '独立行政法人国立病院機構'
    document_title: str = '被告第９準備書面'


def pad_to(value: str, placeholder: str) -> str:
    """Right-pad with full-width spaces up to the placeholder's length."""
    return value + IDEOGRAPHIC_SPACE * max(0, len(placeholder) - len(value))


def full_width_fax(fax: str) -> str:
    """
    Examples:
        >>> full_width_fax('082-228-2306')
        '０８２－２２８－２３０６'
    """
    return to_full_width_digits(fax).replace('-', '－')


def apply_info_to_template(
    document_xml: str,
    info: DocumentInfo,
    document_title: str,
    today: Optional[date] = None,
    placeholders: Optional[TemplatePlaceholders] = None,
) -> str:
    """
    Fill the template body with extracted fields.

    Absent fields leave their sample value in place for manual editing; the
    dates and the document title are always replaced.
    """
    p = placeholders or TemplatePlaceholders()
    xml = document_xml

    if info.court_name:
        xml = replace_in_document_xml(xml, p.court_name, pad_to(info.court_name, p.court_name))
    if info.court_fax:
        xml = replace_in_document_xml(xml, p.court_fax, info.court_fax)
        xml = replace_in_document_xml(xml, p.court_fax_full_width, full_width_fax(info.court_fax))
    if info.plaintiff_lawyer:
        xml = replace_in_document_xml(xml, p.plaintiff_lawyer, pad_to(info.plaintiff_lawyer, p.plaintiff_lawyer))
    if info.plaintiff_lawyer_fax:
        xml = replace_in_document_xml(xml, p.plaintiff_lawyer_fax, info.plaintiff_lawyer_fax)

    xml = replace_in_document_xml(xml, p.cover_date, format_reiwa_date(today))
    xml = replace_in_document_xml(xml, p.receipt_month, format_reiwa_month(today))

    if info.case_number:
        xml = replace_in_document_xml(xml, p.case_number, to_full_width_digits(info.case_number))
    if info.case_name:
        xml = replace_in_document_xml(xml, p.case_name, info.case_name)
    if info.plaintiff_name:
        xml = replace_in_document_xml(xml, p.plaintiff_name, info.plaintiff_name)
    if info.defendant_name:
        xml = replace_in_document_xml(xml, p.defendant_name, info.defendant_name)

    return replace_in_document_xml(xml, p.document_title, document_title)


def fill_docx(
    template: bytes,
    info: DocumentInfo,
    document_title: str,
    today: Optional[date] = None,
    placeholders: Optional[TemplatePlaceholders] = None,
) -> bytes:
    """
    Fill a .docx template and return the new package bytes.

    Every archive member except word/document.xml is copied unchanged.
    """
    source = zipfile.ZipFile(io.BytesIO(template))
    output = io.BytesIO()
    with source, zipfile.ZipFile(output, 'w', zipfile.ZIP_DEFLATED) as target:
        for item in source.infolist():
            data = source.read(item.filename)
            if item.filename == DOCUMENT_XML:
                xml = apply_info_to_template(data.decode('utf-8'), info, document_title, today, placeholders)
                data = xml.encode('utf-8')
            target.writestr(item, data)

    logger.info(f"Filled cover sheet template for {document_title!r}", extra={
        "missing_fields": info.missing_fields(),
    })
    return output.getvalue()


_TAG_PREFIX = re.compile(r'^【[^】]+】\s*')
_MATTER_PREFIX = re.compile(r'^[\u4e00-\u9fff]+事案[\s　]+')
_PDF_SUFFIX = re.compile(r'\.pdf$', re.IGNORECASE)


def document_title_from_filename(filename: str) -> str:
    """
    Derive the sent document's title from its PDF filename.

    Examples:
        >>> document_title_from_filename('【至急】広大事案 被告第３準備書面.pdf')
        '被告第３準備書面'
    """
    name = _PDF_SUFFIX.sub('', filename.rsplit('/', 1)[-1])
    name = _TAG_PREFIX.sub('', name)
    return _MATTER_PREFIX.sub('', name)
