"""
Field extraction service for filing cover sheets (文書送付書 / FAX送信書).

Turns embedded-text or OCR text into a DocumentInfo. Every field is driven by
an ordered list of named strategies; absence of evidence yields None, never an
exception.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from filingkit.config import ExtractionConfig
from filingkit.models.document import DocumentInfo
from filingkit.services.matchers import (
    Collector,
    Matcher,
    PatternSpec,
    collect_all,
    first_match,
    spec_matcher,
)
from filingkit.utils.candidates import (
    Candidate,
    CaseNumberCandidate,
    CounselCandidate,
    FaxCandidate,
    FaxRole,
    create_counsel_candidate,
)
from filingkit.utils.scoring import select_best_counsel
from filingkit.utils.text import (
    normalize_fax,
    normalize_line_endings,
    strip_whitespace,
    to_half_width_digits,
)
from filingkit.utils.vocabulary import (
    CASE_SYMBOLS,
    CITY_NAMES,
    COURT_TYPES,
    DEFAULT_CASE_SYMBOL,
    DEFAULT_ERA,
)

logger = logging.getLogger(__name__)

CJK = r'\u4e00-\u9fff'
DIGIT = '[0-9０-９]'
SPACED_DIGITS = rf'{DIGIT}(?:\s*{DIGIT})*'
OPEN = '[（(]'
CLOSE = '[）)]'
SYMBOL = f'[{CASE_SYMBOLS}]'
ERA_COMPACT = '(?:令和|平成)'
ERA_SPACED = r'(?:令\s*和|平\s*成)'
FAX_LABEL = '(?:FAX|ＦＡＸ|Fax|fax)'
FAX_NUMBER = r'[0-9０-９][0-9０-９\-－ー―‐]*'
# Entities whose "(FAX n)" may follow a court name without being the court's
OTHER_ENTITY = r'弁\s*護|代\s*理|事\s*務\s*所|原\s*告|被\s*告'

# Characters after the 当事者 label that still belong to the parties section
PARTY_SECTION_WINDOW = 200
# Lookback used to decide whose fax an unlabeled number is
FAX_LOOKBACK = 200
SENDER_COUNSEL_LOOKBACK = 30
BARE_COUNSEL_LOOKBACK = 50

_OTHERS_SUFFIX = re.compile(r'\s*(外\s*\d+\s*名)\s*$')
_DIVISION_SUFFIXES = (
    re.compile(r'民事第\d+部.*$'),
    re.compile(r'第\d+[民刑]事部$'),
)
_CLAIM_RUN = re.compile(rf'([{CJK}]+請求事件|[{CJK}]+確認事件)')


@dataclass
class FaxResult:
    """Outcome of fax role classification."""
    court_fax_from_pdf: Optional[str] = None
    counsel_fax: Optional[str] = None
    candidates: List[FaxCandidate] = field(default_factory=list)


def canonical_case_number(raw: str) -> str:
    """Whitespace-free, half-width digits, half-width brackets."""
    value = strip_whitespace(raw).replace('（', '(').replace('）', ')')
    return to_half_width_digits(value)


def court_name_base(court_name: str) -> str:
    """Strip a trailing civil/criminal division qualifier: 大阪地方裁判所民事第2部 → 大阪地方裁判所."""
    base = court_name
    for pattern in _DIVISION_SUFFIXES:
        base = pattern.sub('', base)
    return base


def format_party_name(raw: str) -> Optional[str]:
    """
    Remove OCR whitespace from a party name, keeping a multi-party suffix as a
    separate trailing token.

    Examples:
        >>> format_party_name("山 田 民 子  外 1 名")
        '山田民子 外1名'
    """
    name = raw.strip()
    suffix_match = _OTHERS_SUFFIX.search(name)
    if suffix_match:
        base = strip_whitespace(name[:suffix_match.start()])
        suffix = to_half_width_digits(strip_whitespace(suffix_match.group(1)))
        return f'{base} {suffix}' if base else None
    return strip_whitespace(name) or None


class FieldExtractor:
    """Service for extracting structured filing information from document text."""

    def __init__(self, config: Optional[ExtractionConfig] = None):
        """
        Args:
            config: court→fax dictionary and own-office exclusions; defaults to
                the built-in dictionary with no exclusions
        """
        self.config = config or ExtractionConfig()
        self._own_fax_numbers = tuple(normalize_fax(f) for f in self.config.own_fax_numbers)
        self._init_patterns()

    def _init_patterns(self):
        """Initialize regex patterns and strategy cascades."""

        cities = '|'.join(sorted(CITY_NAMES, key=len, reverse=True))
        court_types = '|'.join(COURT_TYPES)
        self.court_pattern = PatternSpec(
            name='court_name',
            pattern=(
                rf'(?:{cities})\s*(?:{court_types})\s*裁\s*判\s*所'
                rf'(?:\s*[{CJK}]{{1,8}}?\s*支\s*部)?'
                rf'(?:\s*(?:民\s*事\s*第\s*{SPACED_DIGITS}\s*部|第\s*{SPACED_DIGITS}\s*[民刑]\s*事\s*部))?'
            ),
            example='広島地方裁判所福山支部民事第1部',
            notes='City + court type, optional branch and numbered division; OCR spaces tolerated',
            flags=0,
        )

        # Case number: four variants from compact to fully spaced OCR output
        case_number_specs = [
            PatternSpec(
                name='case_number_compact',
                pattern=rf'{ERA_COMPACT}{DIGIT}+年{OPEN}{SYMBOL}{CLOSE}第?{DIGIT}+号',
                example='令和6年(ワ)第228号',
                priority=1,
                flags=0,
            ),
            PatternSpec(
                name='case_number_token_spaced',
                pattern=rf'{ERA_COMPACT}\s*{DIGIT}+\s*年\s*{OPEN}\s*{SYMBOL}\s*{CLOSE}\s*第?\s*{DIGIT}+\s*号',
                example='令和6年 （ワ） 第228号',
                priority=2,
                flags=0,
            ),
            PatternSpec(
                name='case_number_era_spaced',
                pattern=rf'{ERA_SPACED}\s*{DIGIT}+\s*年\s*{OPEN}\s*{SYMBOL}\s*{CLOSE}\s*第?\s*{DIGIT}+\s*号',
                example='令 和 6 年 ( ワ ) 第 228 号',
                priority=3,
                flags=0,
            ),
            PatternSpec(
                name='case_number_fully_spaced',
                pattern=(
                    rf'{ERA_SPACED}\s*{SPACED_DIGITS}\s*年\s*{OPEN}\s*{SYMBOL}\s*{CLOSE}'
                    rf'\s*第?\s*{SPACED_DIGITS}\s*号'
                ),
                example='令 和 6 年 ( ワ ) 第 2 2 8 号',
                notes='OCR inserted whitespace between every character',
                priority=4,
                flags=0,
            ),
        ]
        self.case_number_matchers: List[Matcher] = [
            spec_matcher(spec, self._case_number_builder(spec)) for spec in case_number_specs
        ]
        self.case_number_matchers.append(
            Matcher(name='case_display_section', priority=90, func=self._case_number_from_display_section)
        )

        self.case_display_pattern = PatternSpec(
            name='case_display_section',
            pattern=r'事\s*件\s*の\s*表\s*示[】\]\s]*([^\n]{1,80})',
            example='【事件の表示】 第228号',
            flags=0,
        )
        self.case_display_full_pattern = PatternSpec(
            name='case_display_full',
            pattern=(
                rf'(令\s*和|平\s*成)?\s*({SPACED_DIGITS})\s*年?\s*{OPEN}\s*({SYMBOL})\s*{CLOSE}'
                rf'\s*第\s*({SPACED_DIGITS})\s*号'
            ),
            example='6年(ワ)第228号',
            flags=0,
        )
        self.serial_pattern = PatternSpec(
            name='case_serial', pattern=rf'第\s*({SPACED_DIGITS})\s*号', example='第228号', flags=0,
        )
        self.symbol_pattern = PatternSpec(
            name='case_symbol', pattern=rf'{OPEN}\s*({SYMBOL})\s*{CLOSE}', example='(ワ)', flags=0,
        )
        self.era_year_pattern = PatternSpec(
            name='era_year', pattern=rf'令\s*和\s*({DIGIT}+)\s*年', example='令和6年', flags=0,
        )

        # Case name: prefer the pattern that tolerates a line break inside the compound word
        case_name_specs = [
            PatternSpec(
                name='split_damages_claim',
                pattern=r'損害\s*賠償[\s\S]{0,50}?請求\s*事件',
                example='損害 賠償\n請求 事件',
                notes='Justified multi-line header broken between compound word and suffix',
                priority=1,
                flags=0,
            ),
            PatternSpec(
                name='after_case_number',
                pattern=rf'号\s*([{CJK}]+(?:請求|確認|等)?\s*事件)',
                example='第228号 貸金返還請求事件',
                priority=2,
                flags=0,
            ),
            PatternSpec(
                name='known_claim_types',
                pattern=(
                    rf'(損害賠償請求事件|貸金返還請求事件|建物明渡請求事件|不当利得返還請求事件'
                    rf'|[{CJK}]+請求事件)'
                ),
                example='建物明渡請求事件',
                priority=3,
                flags=0,
            ),
            PatternSpec(
                name='spaced_claim_suffix',
                pattern=rf'([{CJK}]+\s+(?:請求|確認)\s*事件)',
                example='地位 確認 事件',
                priority=4,
                flags=0,
            ),
        ]
        self.case_name_matchers: List[Matcher] = [
            spec_matcher(spec, self._case_name_builder(spec)) for spec in case_name_specs
        ]

        # Parties
        self.party_section_pattern = PatternSpec(
            name='party_section',
            pattern=rf'当\s*事\s*者[\s\S]{{0,{PARTY_SECTION_WINDOW}}}',
            example='当事者 原告 山田民子 外1名 被告 国立大学法人広島大学',
            flags=0,
        )
        self.plaintiff_in_section = PatternSpec(
            name='plaintiff_in_party_section',
            pattern=r'原\s*[告&]\s*[_\s]*([^\n原被]{1,40})',
            example='原 & 山田民子',
            notes='告 is often misread as &',
            flags=0,
        )
        self.defendant_in_section = PatternSpec(
            name='defendant_in_party_section',
            pattern=r'被\s*告\s*[_\s]*([^\n原被]{1,40})',
            example='被 告 国立大学法人広島大学',
            flags=0,
        )
        self.plaintiff_fallbacks = [
            PatternSpec(
                name='bracketed_plaintiff',
                pattern=r'[【\[]\s*原\s*告\s*[】\]]\s*([^\n【\[]{1,30})',
                example='【原告】山田民子',
                priority=1,
                flags=0,
            ),
            PatternSpec(
                name='plaintiff_not_counsel',
                pattern=r'原\s*告\s+(?!.*(?:訴訟|代理))([^\n（(被代訴]{1,20})',
                example='原告 山田民子',
                notes='Skip lines about 原告訴訟代理人',
                priority=2,
                flags=0,
            ),
        ]
        self.defendant_fallbacks = [
            PatternSpec(
                name='bracketed_defendant',
                pattern=r'[【\[]\s*(?:被|a)\s*告\s*[】\]]\s*([^\n【\[]{1,30})',
                example='【被告】国立大学法人広島大学',
                notes='被 is sometimes misread as a',
                priority=1,
                flags=0,
            ),
            PatternSpec(
                name='defendant_not_counsel',
                pattern=r'被\s*告\s+(?!.*(?:訴訟|代理))([^\n（(原代訴]{1,30})',
                example='被告 国立大学法人広島大学',
                priority=2,
                flags=0,
            ),
        ]

        # Opposing counsel, by decreasing reliability
        self.counsel_specs = [
            PatternSpec(
                name='plaintiff_counsel_formal',
                pattern=r'原告\s*(?:ら)?\s*(?:訴\s*訟)?\s*代理\s*人\s*弁護\s*士\s*([^\n]{2,20})',
                example='原告訴訟代理人弁護士 石口俊一',
                priority=1,
                flags=0,
            ),
            PatternSpec(
                name='counsel_title_sender',
                pattern=r'人\s*弁護\s*士\s*([^\n]{2,20})',
                example='代理人 弁護士 石口俊一',
                notes='Skipped when 被告 precedes it (our own signature)',
                priority=2,
                flags=0,
            ),
            PatternSpec(
                name='addressed_counsel',
                pattern=r'弁護\s*士\s*([^\n]{2,15})\s*宛',
                example='弁護士 石口俊一 宛て',
                priority=3,
                flags=0,
            ),
            PatternSpec(
                name='bare_counsel',
                pattern=r'弁護\s*士\s*([^\n]{2,15})',
                example='弁護士 石口俊一',
                priority=4,
                flags=0,
            ),
        ]
        self.counsel_collectors: List[Collector] = [
            Collector(name=spec.name, priority=spec.priority, func=self._counsel_collector(spec))
            for spec in self.counsel_specs
        ]

        # Fax numbers
        self.explicit_court_fax_pattern = PatternSpec(
            name='explicit_court_fax',
            pattern=rf'裁\s*判\s*所(?:(?!{OTHER_ENTITY})[\s\S]){{0,60}}?{OPEN}\s*{FAX_LABEL}\s*({FAX_NUMBER})\s*{CLOSE}',
            example='広島地方裁判所 御中\n(FAX 082-228-2306)',
            notes='No counsel or party label may sit between the court and the parenthetical',
            flags=0,
        )
        self.labeled_fax_pattern = PatternSpec(
            name='labeled_fax',
            pattern=rf'([{CJK}]{{1,10}})\s*{OPEN}\s*{FAX_LABEL}\s*({FAX_NUMBER})\s*{CLOSE}',
            example='石口 (FAX 06-1234-5678)',
            flags=0,
        )
        self.fax_pattern = PatternSpec(
            name='fax',
            pattern=rf'{FAX_LABEL}[：:\s]*({FAX_NUMBER})',
            example='FAX：06-1234-5678',
            flags=0,
        )
        self.plaintiff_counsel_label = PatternSpec(
            name='plaintiff_counsel_label',
            pattern=r'原告\s*(?:ら)?\s*訴\s*訟\s*代\s*理\s*人',
            example='原告訴訟代理人',
            flags=0,
        )
        self.defendant_counsel_label = PatternSpec(
            name='defendant_counsel_label',
            pattern=r'被告\s*(?:ら)?\s*訴\s*訟\s*代\s*理\s*人',
            example='被告ら訴訟代理人',
            flags=0,
        )
        self.counsel_title_pattern = PatternSpec(
            name='counsel_title', pattern=r'弁護\s*士', example='弁護士', flags=0,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def extract(self, text: str, _debug: Optional[Dict[str, Any]] = None) -> DocumentInfo:
        """
        Extract every field from document text.

        Args:
            text: Embedded text layer or OCR transcript
            _debug: Optional dict receiving matched pattern names and candidates

        Returns:
            DocumentInfo with the PDF-embedded court fax already promoted
        """
        text = normalize_line_endings(text)

        court_name = self.extract_court_name(text)
        case_number = self.extract_case_number(text, _debug=_debug)
        plaintiff, defendant = self.extract_parties(text, _debug=_debug)
        faxes = self.extract_fax_numbers(text)

        if _debug is not None:
            _debug['fax_candidates'] = [
                {'value': c.value, 'role': c.role.value, 'reason': c.reason, 'label': c.label}
                for c in faxes.candidates
            ]

        info = DocumentInfo(
            court_name=court_name,
            court_fax=self.lookup_court_fax(court_name),
            case_number=case_number.value if case_number else None,
            case_number_guessed=case_number.guessed if case_number else False,
            case_name=self.extract_case_name(text, _debug=_debug),
            plaintiff_name=plaintiff,
            defendant_name=defendant,
            plaintiff_lawyer=self.extract_counsel_name(text, _debug=_debug),
            plaintiff_lawyer_fax=faxes.counsel_fax,
            court_fax_from_pdf=faxes.court_fax_from_pdf,
        )
        return info.promote_court_fax()

    # ------------------------------------------------------------------
    # Court
    # ------------------------------------------------------------------

    def extract_court_name(self, text: str) -> Optional[str]:
        """
        Collect every court-name match and keep the longest cleaned one, the
        most complete (header "大阪地方裁判所" vs body "大阪地方裁判所民事第2部").
        """
        candidates = [
            Candidate(
                value=to_half_width_digits(strip_whitespace(match.group(0))),
                pattern_name=self.court_pattern.name,
                match_span=match.span(),
                raw_text=match.group(0),
            )
            for match in self.court_pattern.finditer(text)
        ]
        if not candidates:
            return None

        best = candidates[0]
        for candidate in candidates[1:]:
            if len(candidate.value) > len(best.value):
                best = candidate
        return best.value

    def lookup_court_fax(self, court_name: Optional[str]) -> Optional[str]:
        """Dictionary lookup keyed on the court name without its division qualifier."""
        if not court_name:
            return None
        return self.config.court_fax_map.get(court_name_base(court_name))

    # ------------------------------------------------------------------
    # Case number
    # ------------------------------------------------------------------

    def _case_number_builder(self, spec: PatternSpec):
        def build(match: re.Match) -> CaseNumberCandidate:
            return CaseNumberCandidate(
                value=canonical_case_number(match.group(0)),
                pattern_name=spec.name,
                match_span=match.span(),
                priority=spec.priority,
                raw_text=match.group(0),
            )
        return build

    def _case_number_from_display_section(self, text: str) -> Optional[CaseNumberCandidate]:
        """
        Fallback: read the serial number from the 事件の表示 section and rebuild
        the case number around it.

        The symbol defaults to ワ when unreadable, and the era year is the
        smallest 令和N年 anywhere in the text; either inference marks the
        result as guessed.
        """
        section = self.case_display_pattern.search(text)
        if section is None:
            return None
        section_text = section.group(1)
        span = section.span(1)

        full = self.case_display_full_pattern.search(section_text)
        if full:
            era = strip_whitespace(full.group(1)) if full.group(1) else DEFAULT_ERA
            year = to_half_width_digits(strip_whitespace(full.group(2)))
            serial = to_half_width_digits(strip_whitespace(full.group(4)))
            return CaseNumberCandidate(
                value=f'{era}{year}年({full.group(3)})第{serial}号',
                pattern_name='case_display_full',
                match_span=span,
                priority=90,
                raw_text=section_text,
            )

        serial_match = self.serial_pattern.search(section_text)
        if serial_match is None:
            return None
        serial = to_half_width_digits(strip_whitespace(serial_match.group(1)))

        symbol_match = self.symbol_pattern.search(section_text)
        symbol = symbol_match.group(1) if symbol_match else DEFAULT_CASE_SYMBOL
        guessed = symbol_match is None

        years = [int(to_half_width_digits(m.group(1))) for m in self.era_year_pattern.finditer(text)]
        if years:
            value = f'{DEFAULT_ERA}{min(years)}年({symbol})第{serial}号'
        else:
            value = f'({symbol})第{serial}号'
            guessed = True

        return CaseNumberCandidate(
            value=value,
            pattern_name='case_display_serial',
            match_span=span,
            priority=91,
            raw_text=section_text,
            guessed=guessed,
        )

    def extract_case_number(
        self, text: str, _debug: Optional[Dict[str, Any]] = None
    ) -> Optional[CaseNumberCandidate]:
        """
        Extract the case number (令和6年(ワ)第228号).

        Returns:
            CaseNumberCandidate (value + guessed flag) or None
        """
        candidate = first_match(self.case_number_matchers, text, 'caseNumber', _debug)
        if candidate is not None and candidate.guessed:
            logger.warning("Case number reconstructed from partial evidence", extra={
                "case_number": candidate.value,
                "pattern": candidate.pattern_name,
            })
            if _debug is not None:
                _debug.setdefault('warnings', []).append('case_number_guessed')
        return candidate

    # ------------------------------------------------------------------
    # Case name
    # ------------------------------------------------------------------

    def _case_name_builder(self, spec: PatternSpec):
        def build(match: re.Match) -> Optional[Candidate]:
            raw = match.group(0)
            if match.groups() and match.group(1) and not raw.startswith('損害'):
                raw = match.group(1)

            name = strip_whitespace(re.sub(r'^号\s*', '', raw))
            cleaned = _CLAIM_RUN.search(name)
            if cleaned:
                name = cleaned.group(1)
            elif '事件' not in name:
                return None

            return Candidate(
                value=name,
                pattern_name=spec.name,
                match_span=match.span(),
                priority=spec.priority,
                raw_text=match.group(0),
            )
        return build

    def extract_case_name(self, text: str, _debug: Optional[Dict[str, Any]] = None) -> Optional[str]:
        """Extract the case name (損害賠償請求事件, 地位確認事件, ...)."""
        candidate = first_match(self.case_name_matchers, text, 'caseName', _debug)
        return candidate.value if candidate else None

    # ------------------------------------------------------------------
    # Parties
    # ------------------------------------------------------------------

    def extract_parties(
        self, text: str, _debug: Optional[Dict[str, Any]] = None
    ) -> Tuple[Optional[str], Optional[str]]:
        """
        Extract (plaintiff, defendant).

        The 当事者 section is tried first; each party missing from it falls back
        to label-anchored patterns over the whole text.
        """
        plaintiff = defendant = None

        section = self.party_section_pattern.search(text)
        if section:
            section_text = section.group(0)
            match = self.plaintiff_in_section.search(section_text)
            if match:
                plaintiff = format_party_name(match.group(1))
            match = self.defendant_in_section.search(section_text)
            if match:
                defendant = format_party_name(match.group(1))

        if plaintiff is None:
            plaintiff = self._first_party(self.plaintiff_fallbacks, text, 'plaintiffName', _debug)
        elif _debug is not None:
            _debug.setdefault('patterns_matched', {})['plaintiffName'] = self.plaintiff_in_section.name

        if defendant is None:
            defendant = self._first_party(self.defendant_fallbacks, text, 'defendantName', _debug)
        elif _debug is not None:
            _debug.setdefault('patterns_matched', {})['defendantName'] = self.defendant_in_section.name

        return plaintiff, defendant

    def _first_party(
        self,
        specs: List[PatternSpec],
        text: str,
        field_name: str,
        _debug: Optional[Dict[str, Any]],
    ) -> Optional[str]:
        def build_for(spec: PatternSpec):
            def build(match: re.Match) -> Optional[Candidate]:
                name = format_party_name(match.group(1))
                if name is None:
                    return None
                return Candidate(value=name, pattern_name=spec.name, match_span=match.span(),
                                 priority=spec.priority, raw_text=match.group(0))
            return build

        matchers = [spec_matcher(spec, build_for(spec)) for spec in specs]
        candidate = first_match(matchers, text, field_name, _debug)
        return candidate.value if candidate else None

    # ------------------------------------------------------------------
    # Counsel
    # ------------------------------------------------------------------

    def _is_own_lawyer(self, name: str) -> bool:
        return any(own in name for own in self.config.own_lawyer_names)

    def _counsel_collector(self, spec: PatternSpec):
        def collect(text: str) -> List[CounselCandidate]:
            found: List[CounselCandidate] = []
            for match in spec.finditer(text):
                if spec.name == 'counsel_title_sender':
                    before = text[max(0, match.start() - SENDER_COUNSEL_LOOKBACK):match.start()]
                    if '被告' in before:
                        continue
                elif spec.name == 'bare_counsel':
                    before = text[max(0, match.start() - BARE_COUNSEL_LOOKBACK):match.start()]
                    if '被告' in before:
                        continue

                candidate = create_counsel_candidate(
                    raw_capture=match.group(1),
                    pattern_name=spec.name,
                    match_span=match.span(),
                    priority=spec.priority,
                )
                if candidate is None or self._is_own_lawyer(candidate.value):
                    continue
                found.append(candidate)
            return found
        return collect

    def extract_counsel_name(self, text: str, _debug: Optional[Dict[str, Any]] = None) -> Optional[str]:
        """Extract opposing (plaintiff's) counsel name from all pattern tiers."""
        candidates = collect_all(self.counsel_collectors, text, 'plaintiffLawyer', _debug)
        return select_best_counsel(candidates)

    # ------------------------------------------------------------------
    # Fax numbers
    # ------------------------------------------------------------------

    def _is_own_fax(self, fax: str) -> bool:
        return any(own in fax for own in self._own_fax_numbers)

    def _is_known_court_fax(self, fax: str) -> bool:
        return any(court_fax in fax for court_fax in self.config.known_court_faxes)

    @staticmethod
    def _last_end(spec: PatternSpec, text: str) -> int:
        """End offset of the last match of ``spec`` in ``text``, or -1."""
        last = -1
        for match in spec.finditer(text):
            last = match.end()
        return last

    def classify_unlabeled_fax(self, text: str, index: int, fax: str) -> Tuple[FaxRole, str]:
        """
        Decide whose fax an unlabeled number is from the text preceding it.

        Returns:
            (role, reason)
        """
        before = text[max(0, index - FAX_LOOKBACK):index]

        plaintiff_at = self._last_end(self.plaintiff_counsel_label, before)
        defendant_at = self._last_end(self.defendant_counsel_label, before)

        # The counsel label nearest to the number decides
        if defendant_at > plaintiff_at:
            return FaxRole.SELF, 'near_defendant_counsel'
        if self._is_known_court_fax(fax):
            return FaxRole.COURT, 'known_court_fax'
        if plaintiff_at >= 0:
            return FaxRole.COUNSEL, 'near_plaintiff_counsel'
        if self.counsel_title_pattern.search(before) and '被告' not in before:
            return FaxRole.COUNSEL, 'near_counsel_title'
        if self.config.require_counsel_proximity:
            return FaxRole.UNKNOWN, 'no_proximity_evidence'
        return FaxRole.COUNSEL, 'unclassified_default'

    def extract_fax_numbers(self, text: str) -> FaxResult:
        """
        Separate the court's fax from opposing counsel's fax.

        Order of evidence:
        1. "裁判所 … (FAX n)" with no counsel or party label in between → court fax as printed in the PDF
        2. "<name> (FAX n)" labels → court if the label mentions 裁判, dropped if it
           mentions 被告, else counsel
        3. unlabeled "FAX n" → classified by the 200 characters before it
        Own-office numbers are discarded first; the first value per role wins.
        """
        result = FaxResult()

        def accept(candidate: FaxCandidate) -> None:
            result.candidates.append(candidate)
            if candidate.role == FaxRole.COURT and result.court_fax_from_pdf is None:
                result.court_fax_from_pdf = candidate.value
            elif candidate.role == FaxRole.COUNSEL and result.counsel_fax is None:
                result.counsel_fax = candidate.value

        explicit = self.explicit_court_fax_pattern.search(text)
        if explicit:
            fax = normalize_fax(explicit.group(1)).rstrip('-')
            role, reason = (FaxRole.SELF, 'own_fax') if self._is_own_fax(fax) else (FaxRole.COURT, 'explicit_court_label')
            accept(FaxCandidate(value=fax, pattern_name=self.explicit_court_fax_pattern.name,
                                match_span=explicit.span(), priority=1, raw_text=explicit.group(0),
                                label='裁判所', role=role, reason=reason))

        for match in self.labeled_fax_pattern.finditer(text):
            label = match.group(1)
            fax = normalize_fax(match.group(2)).rstrip('-')
            if self._is_own_fax(fax):
                role, reason = FaxRole.SELF, 'own_fax'
            elif '裁判' in label:
                role, reason = FaxRole.COURT, 'court_label'
            elif '被告' in label:
                role, reason = FaxRole.SELF, 'defendant_label'
            elif fax == result.court_fax_from_pdf or self._is_known_court_fax(fax):
                role, reason = FaxRole.UNKNOWN, 'court_fax_under_other_label'
            else:
                role, reason = FaxRole.COUNSEL, 'counsel_label'
            accept(FaxCandidate(value=fax, pattern_name=self.labeled_fax_pattern.name,
                                match_span=match.span(), priority=2, raw_text=match.group(0),
                                label=label, role=role, reason=reason))

        for match in self.fax_pattern.finditer(text):
            fax = normalize_fax(match.group(1)).rstrip('-')
            if self._is_own_fax(fax):
                role, reason = FaxRole.SELF, 'own_fax'
            elif result.court_fax_from_pdf and result.court_fax_from_pdf in fax:
                role, reason = FaxRole.UNKNOWN, 'already_court_fax'
            else:
                role, reason = self.classify_unlabeled_fax(text, match.start(), fax)
            accept(FaxCandidate(value=fax, pattern_name=self.fax_pattern.name,
                                match_span=match.span(), priority=3, raw_text=match.group(0),
                                role=role, reason=reason))

        logger.debug("Fax classification", extra={
            "court_fax_from_pdf": result.court_fax_from_pdf,
            "counsel_fax": result.counsel_fax,
            "candidates": len(result.candidates),
        })
        return result
