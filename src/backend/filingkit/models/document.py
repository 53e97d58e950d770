"""
Pydantic models for extracted filing information.
"""

import re
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_PARTY_VALUE = re.compile(r'^\S+(?: 外\d+名)?$')
_COMPACT_VALUE = re.compile(r'^\S+$')


class DocumentInfo(BaseModel):
    """
    Structured fields recovered from a filing cover sheet.

    Every field is either None (no acceptable evidence) or a whitespace-free
    canonical string. Party names may carry one trailing " 外N名" token for
    multi-party cases.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    court_name: Optional[str] = Field(default=None, alias='courtName')
    court_fax: Optional[str] = Field(default=None, alias='courtFax')
    case_number: Optional[str] = Field(default=None, alias='caseNumber')
    case_number_guessed: bool = Field(default=False, alias='caseNumberGuessed')
    case_name: Optional[str] = Field(default=None, alias='caseName')
    plaintiff_name: Optional[str] = Field(default=None, alias='plaintiffName')
    defendant_name: Optional[str] = Field(default=None, alias='defendantName')
    plaintiff_lawyer: Optional[str] = Field(default=None, alias='plaintiffLawyer')
    plaintiff_lawyer_fax: Optional[str] = Field(default=None, alias='plaintiffLawyerFax')
    court_fax_from_pdf: Optional[str] = Field(default=None, alias='courtFaxFromPdf')

    @field_validator(
        'court_name', 'court_fax', 'case_number', 'case_name',
        'plaintiff_lawyer', 'plaintiff_lawyer_fax', 'court_fax_from_pdf',
    )
    @classmethod
    def _compact(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        if not _COMPACT_VALUE.match(value):
            raise ValueError(f"value must be non-empty and whitespace-free: {value!r}")
        return value

    @field_validator('plaintiff_name', 'defendant_name')
    @classmethod
    def _party(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        if not _PARTY_VALUE.match(value):
            raise ValueError(f"party name must be whitespace-free apart from an 外N名 suffix: {value!r}")
        return value

    def promote_court_fax(self) -> 'DocumentInfo':
        """Return a copy where a fax found in the PDF supersedes the dictionary value."""
        if not self.court_fax_from_pdf:
            return self
        return self.model_copy(update={'court_fax': self.court_fax_from_pdf})

    def to_dict(self) -> Dict[str, Any]:
        """camelCase mapping of the present fields, for review forms and templates."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def missing_fields(self) -> list[str]:
        """camelCase names of fields a human reviewer still has to fill in."""
        wanted = ('court_name', 'court_fax', 'case_number', 'case_name', 'plaintiff_name',
                  'defendant_name', 'plaintiff_lawyer', 'plaintiff_lawyer_fax')
        return [
            type(self).model_fields[name].alias
            for name in wanted
            if getattr(self, name) is None
        ]
