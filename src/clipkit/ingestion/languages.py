"""Per-language phrase and date tables for the clippings format.

Matching against these tables is case-insensitive substring search, so a
classification phrase of one language must never occur inside a phrase of
another language. ``LanguageCatalog.validate`` checks that invariant.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping, Sequence

_EN_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_EN_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def _date_names(
    *,
    months: Sequence[str] = (),
    weekdays: Sequence[str] = (),
    meridiem: Mapping[str, str] | None = None,
) -> tuple[tuple[str, str], ...]:
    """Build (localized, english) pairs; "a/b" lists alternate spellings."""

    pairs: list[tuple[str, str]] = []
    for localized, english in zip(months, _EN_MONTHS):
        pairs.extend((form, english) for form in localized.split("/"))
    for localized, english in zip(weekdays, _EN_WEEKDAYS):
        pairs.extend((form, english) for form in localized.split("/"))
    for localized, english in (meridiem or {}).items():
        pairs.append((localized, english))
    return tuple(pairs)


def phrase_forms(phrase: str) -> tuple[str, ...]:
    """Split a "a/b" phrase into its alternate device spellings."""

    return tuple(form.strip() for form in phrase.split("/") if form.strip())


@dataclass(frozen=True, slots=True)
class LanguagePatterns:
    """Literal phrases and date formats one device language uses.

    Type phrases may list alternate spellings separated by "/".
    """

    code: str
    added_on: str
    highlight: str
    note: str
    bookmark: str
    clip: str
    page: str
    location: str
    date_formats: tuple[str, ...]
    date_names: tuple[tuple[str, str], ...] = ()

    @property
    def type_phrases(self) -> tuple[str, str, str, str]:
        return (self.highlight, self.note, self.bookmark, self.clip)

    @property
    def type_forms(self) -> tuple[tuple[str, ...], ...]:
        return tuple(phrase_forms(phrase) for phrase in self.type_phrases)

    @property
    def classification_phrases(self) -> tuple[str, ...]:
        return (self.added_on, *(form for forms in self.type_forms for form in forms))


@dataclass(frozen=True, slots=True)
class LanguageCatalog:
    """Ordered, immutable set of language tables.

    Order matters: the first entry is the default language and detection
    ties resolve in catalog order.
    """

    languages: tuple[LanguagePatterns, ...]

    def __post_init__(self) -> None:
        if not self.languages:
            raise ValueError("Language catalog cannot be empty")
        codes = [patterns.code for patterns in self.languages]
        if len(set(codes)) != len(codes):
            raise ValueError("Language catalog contains duplicate codes")

    def __iter__(self) -> Iterator[LanguagePatterns]:
        return iter(self.languages)

    def __contains__(self, code: object) -> bool:
        return any(patterns.code == code for patterns in self.languages)

    @property
    def codes(self) -> tuple[str, ...]:
        return tuple(patterns.code for patterns in self.languages)

    @property
    def default_language(self) -> str:
        return self.languages[0].code

    def get(self, code: str) -> LanguagePatterns:
        for patterns in self.languages:
            if patterns.code == code:
                return patterns
        raise ValueError(f"Unsupported language code: {code!r}")

    def find_conflicts(self) -> list[tuple[str, str, str, str]]:
        """Return (lang, phrase, other_lang, other_phrase) substring overlaps."""

        conflicts: list[tuple[str, str, str, str]] = []
        for patterns in self.languages:
            for other in self.languages:
                if other.code == patterns.code:
                    continue
                for phrase in patterns.classification_phrases:
                    needle = phrase.casefold()
                    for other_phrase in other.classification_phrases:
                        if needle in other_phrase.casefold():
                            conflicts.append((patterns.code, phrase, other.code, other_phrase))
        return conflicts

    def validate(self) -> None:
        conflicts = self.find_conflicts()
        if conflicts:
            rendered = "; ".join(f"{a}:{p!r} in {b}:{q!r}" for a, p, b, q in conflicts)
            raise ValueError(f"Ambiguous language phrases: {rendered}")


ENGLISH = LanguagePatterns(
    code="en",
    added_on="Added on",
    highlight="Your Highlight",
    note="Your Note",
    bookmark="Your Bookmark",
    clip="Your Clip",
    page="page",
    location="Location",
    date_formats=(
        "%A, %B %d, %Y %I:%M:%S %p",  # Friday, January 1, 2024 10:30:45 AM
        "%A, %d %B %Y %H:%M:%S",  # Friday, 1 January 2024 10:30:45
        "%A, %B %d, %Y, %I:%M %p",  # Friday, January 1, 2024, 10:30 AM
        "%A, %B %d, %Y",
    ),
)

SPANISH = LanguagePatterns(
    code="es",
    added_on="Añadido el",
    highlight="subrayado",  # "Tu subrayado" and "La subrayado"
    note="Tu nota/La nota",
    bookmark="Tu marcador/El marcador",
    clip="Tu recorte/El recorte",
    page="página",
    location="posición",
    date_formats=(
        "%A, %d de %B de %Y %H:%M:%S",  # viernes, 1 de enero de 2024 10:30:45
        "%A %d de %B de %Y %H:%M:%S",
    ),
    date_names=_date_names(
        months=(
            "enero", "febrero", "marzo", "abril", "mayo", "junio", "julio",
            "agosto", "septiembre/setiembre", "octubre", "noviembre", "diciembre",
        ),
        weekdays=("lunes", "martes", "miércoles", "jueves", "viernes", "sábado", "domingo"),
    ),
)

PORTUGUESE = LanguagePatterns(
    code="pt",
    added_on="Adicionado em",
    highlight="Seu destaque",
    note="Sua nota",
    bookmark="Seu marcador",
    clip="Seu recorte",
    page="página",
    location="posição",
    date_formats=("%A, %d de %B de %Y %H:%M:%S",),  # sexta-feira, 1 de janeiro de 2024 10:30:45
    date_names=_date_names(
        months=(
            "janeiro", "fevereiro", "março", "abril", "maio", "junho", "julho",
            "agosto", "setembro", "outubro", "novembro", "dezembro",
        ),
        weekdays=(
            "segunda-feira", "terça-feira", "quarta-feira", "quinta-feira",
            "sexta-feira", "sábado", "domingo",
        ),
    ),
)

GERMAN = LanguagePatterns(
    code="de",
    added_on="Hinzugefügt am",
    highlight="Ihre Markierung",
    note="Ihre Notiz",
    bookmark="Ihr Lesezeichen",
    clip="Ihr Ausschnitt",
    page="Seite",
    location="Position",
    date_formats=(
        "%A, %d. %B %Y %H:%M:%S",  # Freitag, 1. Januar 2024 10:30:45
        "%A, %d. %B %Y um %H:%M:%S",
    ),
    date_names=_date_names(
        months=(
            "Januar/Jänner", "Februar", "März", "April", "Mai", "Juni", "Juli",
            "August", "September", "Oktober", "November", "Dezember",
        ),
        weekdays=("Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag/Sonnabend", "Sonntag"),
    ),
)

FRENCH = LanguagePatterns(
    code="fr",
    added_on="Ajouté le",
    highlight="Votre surlignage",
    note="Votre note",
    bookmark="Votre signet",
    clip="Votre extrait",
    page="page",
    location="emplacement",
    date_formats=(
        "%A %d %B %Y %H:%M:%S",  # vendredi 1 janvier 2024 10:30:45
        "%A %d %B %Y à %H:%M:%S",
    ),
    date_names=_date_names(
        months=(
            "janvier", "février", "mars", "avril", "mai", "juin", "juillet",
            "août", "septembre", "octobre", "novembre", "décembre",
        ),
        weekdays=("lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche"),
    ),
)

ITALIAN = LanguagePatterns(
    code="it",
    added_on="Aggiunto il",
    highlight="La tua evidenziazione",
    note="La tua nota",
    bookmark="Il tuo segnalibro",
    clip="Il tuo ritaglio",
    page="pagina",
    location="posizione",
    date_formats=("%A %d %B %Y %H:%M:%S",),  # venerdì 1 gennaio 2024 10:30:45
    date_names=_date_names(
        months=(
            "gennaio", "febbraio", "marzo", "aprile", "maggio", "giugno", "luglio",
            "agosto", "settembre", "ottobre", "novembre", "dicembre",
        ),
        weekdays=("lunedì", "martedì", "mercoledì", "giovedì", "venerdì", "sabato", "domenica"),
    ),
)

CHINESE = LanguagePatterns(
    code="zh",
    added_on="添加于",
    highlight="您的标注",
    note="您的笔记",
    bookmark="您的书签",
    clip="您的剪贴",
    page="页",
    location="位置",
    date_formats=(
        "%Y年%m月%d日%A %p%I:%M:%S",  # 2024年1月1日星期五 上午10:30:45
        "%Y年%m月%d日%A %H:%M:%S",
    ),
    date_names=_date_names(
        weekdays=("星期一", "星期二", "星期三", "星期四", "星期五", "星期六", "星期日/星期天"),
        meridiem={"上午": "AM", "下午": "PM"},
    ),
)

JAPANESE = LanguagePatterns(
    code="ja",
    added_on="追加日",
    highlight="ハイライト",
    note="メモ",
    bookmark="ブックマーク",
    clip="クリップ",
    page="ページ",
    location="位置",
    date_formats=(
        "%Y年%m月%d日%A %H:%M:%S",  # 2024年1月1日金曜日 10:30:45
        "%Y年%m月%d日%A %p%I:%M:%S",
    ),
    date_names=_date_names(
        weekdays=("月曜日", "火曜日", "水曜日", "木曜日", "金曜日", "土曜日", "日曜日"),
        meridiem={"午前": "AM", "午後": "PM"},
    ),
)

KOREAN = LanguagePatterns(
    code="ko",
    added_on="추가됨",
    highlight="하이라이트",
    note="메모",
    bookmark="북마크",
    clip="클립",
    page="페이지",
    location="위치",
    date_formats=("%Y년 %m월 %d일 %A %p %I:%M:%S",),  # 2024년 1월 1일 금요일 오전 10:30:45
    date_names=_date_names(
        weekdays=("월요일", "화요일", "수요일", "목요일", "금요일", "토요일", "일요일"),
        meridiem={"오전": "AM", "오후": "PM"},
    ),
)

DUTCH = LanguagePatterns(
    code="nl",
    added_on="Toegevoegd op",
    highlight="Uw markering",
    note="Uw notitie",
    bookmark="Uw bladwijzer",
    clip="Uw knipsel",
    page="pagina",
    location="locatie",
    date_formats=("%A %d %B %Y %H:%M:%S",),  # vrijdag 1 januari 2024 10:30:45
    date_names=_date_names(
        months=(
            "januari", "februari", "maart", "april", "mei", "juni", "juli",
            "augustus", "september", "oktober", "november", "december",
        ),
        weekdays=("maandag", "dinsdag", "woensdag", "donderdag", "vrijdag", "zaterdag", "zondag"),
    ),
)

RUSSIAN = LanguagePatterns(
    code="ru",
    added_on="Добавлено",
    highlight="Ваше выделение",
    note="Ваша заметка",
    bookmark="Ваша закладка",
    clip="Ваша вырезка",
    page="страниц",  # "страница" and "странице"
    location="позиц",  # "позиция" and "позиции"
    date_formats=(
        "%A, %d %B %Y г. %H:%M:%S",  # пятница, 1 января 2024 г. 10:30:45
        "%A, %d %B %Y г. в %H:%M:%S",
    ),
    date_names=_date_names(
        months=(
            "января/январь", "февраля/февраль", "марта/март", "апреля/апрель",
            "мая/май", "июня/июнь", "июля/июль", "августа/август",
            "сентября/сентябрь", "октября/октябрь", "ноября/ноябрь", "декабря/декабрь",
        ),
        weekdays=("понедельник", "вторник", "среда", "четверг", "пятница", "суббота", "воскресенье"),
    ),
)

DEFAULT_CATALOG = LanguageCatalog(
    languages=(
        ENGLISH,
        SPANISH,
        PORTUGUESE,
        GERMAN,
        FRENCH,
        ITALIAN,
        CHINESE,
        JAPANESE,
        KOREAN,
        DUTCH,
        RUSSIAN,
    )
)
SUPPORTED_LANGUAGES = DEFAULT_CATALOG.codes
