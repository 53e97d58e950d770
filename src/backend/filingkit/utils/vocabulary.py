"""
Fixed domain vocabularies for Japanese civil-litigation cover sheets.

Everything here is read-only; the court→fax dictionary is copied into an
immutable ExtractionConfig before the extractor sees it.
"""

from types import MappingProxyType
from typing import Mapping, Tuple

# Court seat cities (district/high court locations plus the branch seats seen in practice)
CITY_NAMES: Tuple[str, ...] = (
    '東京', '大阪', '名古屋', '広島', '福岡', '仙台', '札幌', '高松', '京都', '神戸',
    '横浜', 'さいたま', '千葉', '山口', '岡山', '福山', '松山', '高知', '那覇', '長崎',
    '熊本', '鹿児島', '大分', '宮崎', '佐賀', '秋田', '青森', '盛岡', '山形', '福島',
    '水戸', '宇都宮', '前橋', '甲府', '長野', '新潟', '富山', '金沢', '福井', '津',
    '大津', '奈良', '和歌山', '鳥取', '松江', '徳島', '旭川', '釧路', '函館',
)

# district / high / family / summary
COURT_TYPES: Tuple[str, ...] = ('地方', '高等', '家庭', '簡易')

# Case-type symbols written inside brackets: 令和6年(ワ)第228号.
# Hiragana forms are OCR misreads of the katakana symbol.
CASE_SYMBOLS = 'ワヲネレモハノニナラ行わをねれもはのになら'
DEFAULT_CASE_SYMBOL = 'ワ'

ERA_NAMES: Tuple[str, ...] = ('令和', '平成')
DEFAULT_ERA = '令和'

# Claim-type suffixes a case name ends with
CLAIM_SUFFIXES: Tuple[str, ...] = ('請求事件', '確認事件')

# Honorific / addressee tails that follow a counsel name on cover sheets
ADDRESSEE_SUFFIXES: Tuple[str, ...] = ('宛て', '宛', '殿', '様', '御中')

# Leading characters of boilerplate that OCR tends to glue after "弁護士"
# (弁護士法, 弁護士会, 事件番号, 裁判所 ...)
BOILERPLATE_LEADING_CHARS = '法会事件番号裁判'

COURT_FAX_MAP: Mapping[str, str] = MappingProxyType({
    '神戸地方裁判所尼崎支部': '06-6438-1710',
    '大阪地方裁判所': '06-6316-2804',
    '大阪高等裁判所': '06-6316-2804',
    '東京地方裁判所': '03-3580-5611',
    '東京高等裁判所': '03-3580-5611',
    '広島地方裁判所': '082-228-0197',
    '広島高等裁判所': '082-228-0197',
    '広島地方裁判所福山支部': '084-923-2897',
    '岡山地方裁判所': '086-222-6961',
    '福岡地方裁判所': '092-781-3141',
    '名古屋地方裁判所': '052-204-7780',
    '京都地方裁判所': '075-211-4226',
    '神戸地方裁判所': '078-367-1478',
    '横浜地方裁判所': '045-212-0947',
    'さいたま地方裁判所': '048-863-8761',
    '千葉地方裁判所': '043-227-5601',
    '仙台地方裁判所': '022-266-0091',
    '札幌地方裁判所': '011-271-1456',
    '山口地方裁判所': '083-922-1440',
})

# Receipt page / anchor tokens
RECEIPT_LABEL_TOKENS: Tuple[str, ...] = ('受領書', '受領')
STRIKE_TARGET_TOKEN = '行'
COUNSEL_TOKENS: Tuple[str, ...] = ('弁護', '護士')
AGENT_TOKENS: Tuple[str, ...] = ('代理人', '代理')
PARTY_TOKENS: Tuple[str, ...] = ('被告', '原告')
TITLE_END_TOKEN = '人'
ERA_TOKEN_PREFIX = '令'
DATE_MARKERS: Tuple[str, ...] = ('年', '月')
