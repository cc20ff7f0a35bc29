"""Field strategies operating on normalized résumé text.

Each ``extract_*`` function is independent and pure: it takes normalized text
(or its non-empty lines) and returns the field value, or an empty value when
nothing trustworthy was found. None of them raise on missing data.
"""

from __future__ import annotations

import re
from typing import Iterable, Sequence

from ..schemas import ExperienceEntry, Skill

EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
VALID_EMAIL_RE = re.compile(
    r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@(?:[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?\.)+[A-Za-z]{2,}"
)

# Ordered from most to least locale-specific; the first pattern with a hit wins.
PHONE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (name, re.compile(rf"(?<![\d+]){pattern}(?!\d)"))
    for name, pattern in (
        ("india", r"\+91 ?\d{4} ?\d{5}"),
        ("uk", r"\+44 ?(?:\(0\) ?)?\d{2,4} ?\d{3,4} ?\d{3,4}"),
        ("north_america", r"\+1 ?\(?\d{3}\)?[ .-]?\d{3}[ .-]?\d{4}"),
        ("international", r"\+\d{1,3} ?\d{4,5} ?\d{4,5}"),
        ("national_trunk", r"0\d{2,4} ?\d{3,4} ?\d{3,4}"),
        ("grouped_ten_digit", r"\d{3} ?\d{3} ?\d{4}"),
        ("parenthesised_area", r"\(\d{2,4}\) ?\d{3,4} ?\d{3,4}"),
        ("bare_digits", r"\d{10,}"),
        ("loose", r"\+?[\d(][\d ()-]{8,}\d"),
    )
)
PHONE_MIN_DIGITS = 9
PHONE_MAX_DIGITS = 15

ROLE_KEYWORDS = (
    "Manager", "Director", "Coordinator", "Specialist", "Analyst", "Consultant",
    "Advisor", "Adviser", "Officer", "Executive", "Lead", "Head", "Chief",
    "Engineer", "Developer", "Designer", "Assistant", "Associate", "Researcher",
    "Strategist", "Campaigner", "Organiser", "Organizer", "Writer", "Editor",
    "Producer", "Administrator", "Representative", "Intern", "Trainee",
)
_ROLE_ALTERNATION = "|".join(ROLE_KEYWORDS)
ROLE_KEYWORD_RE = re.compile(rf"\b(?:{_ROLE_ALTERNATION})s?\b", re.IGNORECASE)
COMPANY_SUFFIX_RE = re.compile(
    r"\b(?:Limited|Ltd\.?|PLC|LLP|LLC|Inc\.?|Incorporated|Corp\.?|Corporation|GmbH|SAS|BV|SA|Pty\.?(?: Ltd\.?)?)(?=\W|$)",
    re.IGNORECASE,
)
ORGANISATION_WORD_RE = re.compile(
    r"\b(?:Company|Group|Holdings|Partners|Agency|Associates|Foundation|Trust|Council|Institute)\b",
    re.IGNORECASE,
)
# Generic institutional nouns that look like titles but are boilerplate.
INSTITUTION_BLACKLIST_RE = re.compile(r"\b(?:Government|Parliament|Westminster|European\s+Parliament)\b", re.IGNORECASE)
NON_TITLE_WORDS = frozenset(
    {
        "government", "westminster", "european", "parliament", "london", "united",
        "kingdom", "uk", "england", "scotland", "wales", "northern", "ireland",
        "address", "phone", "email", "contact", "location", "date", "time", "year",
        "month", "day", "summary", "objective", "profile", "about", "introduction",
        "education", "qualifications", "skills", "languages", "certifications",
        "references", "referees", "details",
    }
)

SECTION_HEADINGS: dict[str, frozenset[str]] = {
    "summary": frozenset(
        {
            "summary", "profile", "professional summary", "personal profile",
            "profile summary", "career summary", "executive summary",
            "personal statement", "about me", "objective", "career objective",
        }
    ),
    "experience": frozenset(
        {
            "work experience", "professional experience", "experience",
            "employment", "employment history", "career history", "work history",
            "relevant experience", "career",
        }
    ),
    "education": frozenset({"education", "qualifications", "academic background", "education and training"}),
    "skills": frozenset({"skills", "key skills", "core skills", "technical skills", "competencies", "core competencies"}),
    "other": frozenset({"references", "referees", "languages", "certifications", "interests", "contact", "contact details"}),
}
PREFERRED_EXPERIENCE_HEADINGS = frozenset({"work experience", "professional experience"})
_EXPERIENCE_HINT_RE = re.compile(r"experience|employment|career", re.IGNORECASE)

NAME_STOPWORDS = frozenset(
    {"curriculum", "vitae", "resume", "résumé", "cv", "profile", "summary", "contact", "details", "personal"}
)

SKILL_PATTERNS: dict[Skill, re.Pattern[str]] = {
    Skill.COMMUNICATIONS: re.compile(
        r"\b(?:communications?|comms|media|press|pr|public relations|marketing)\b", re.IGNORECASE
    ),
    Skill.CAMPAIGNS: re.compile(
        r"\b(?:campaigns?|campaigning|advocacy|engagement|grassroots|activism|outreach)\b", re.IGNORECASE
    ),
    Skill.POLICY: re.compile(
        r"\b(?:policy|policies|briefings?|consultations?|legislative|regulatory|government)\b", re.IGNORECASE
    ),
    Skill.PUBLIC_AFFAIRS: re.compile(
        r"\b(?:public affairs|government affairs|parliamentary|stakeholder relations|lobbying)\b", re.IGNORECASE
    ),
}

_YEAR_RANGE = r"(?P<start>(?:19|20)\d{2})\s*[-–—]\s*(?P<end>(?:19|20)\d{2}|present|current)"
EXPERIENCE_ROW_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(rf"^(?P<title>.+?)(?:\s*[—–]\s*|\s+-\s+)(?P<employer>.+?)\s*\(\s*{_YEAR_RANGE}\s*\)", re.IGNORECASE),
    re.compile(rf"^(?P<title>.+?)\s+at\s+(?P<employer>.+?),\s*{_YEAR_RANGE}", re.IGNORECASE),
)
_YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
# Longer lines are prose, never a single experience row.
MAX_EXPERIENCE_ROW_LENGTH = 300
_DATE_TAIL_RE = re.compile(r"[\s,(|–—-]*\b(?:(?:19|20)\d{2}|present|current)\b.*$", re.IGNORECASE)

_ROLE_TITLE_RE = re.compile(rf"^([A-Za-z][A-Za-z &/\-]*\b(?:{_ROLE_ALTERNATION})s?)\b", re.IGNORECASE)
_CAPITALISED_PHRASE_RE = re.compile(r"^([A-Z][A-Za-z&/\-]+(?: (?:[A-Z][A-Za-z&/\-]*|of|and|for|the|&))*)")
_EMPLOYER_ON_LINE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\bat\s+([A-Z][A-Za-z0-9&.,' \-]+)", re.IGNORECASE),
    re.compile(r"@\s*([A-Z][A-Za-z0-9&.,' \-]+)"),
    re.compile(r",\s+([A-Z][A-Za-z0-9&.,' \-]+)"),
    re.compile(r"\s[—–|-]\s*([A-Z][A-Za-z0-9&.,' \-]+)"),
)

_HEADER_ROLE_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("title_at_company", re.compile(r"^(?P<title>[A-Z][A-Za-z &/\-]+?)\s+(?:at|At|AT)\s+(?P<company>[A-Z][A-Za-z0-9 &.,'\-]+)$")),
    ("title_comma_company", re.compile(r"^(?P<title>[A-Z][A-Za-z &/\-]+),\s+(?P<company>[A-Z][A-Za-z0-9 &.,'\-]+)$")),
    ("company_dash_title", re.compile(r"^(?P<company>[A-Z][A-Za-z0-9 &.,'\-]+?)\s+[-–—]\s+(?P<title>[A-Z][A-Za-z &/\-]+)$")),
    ("title_at_symbol_company", re.compile(r"^(?P<title>[A-Z][A-Za-z &/\-]+?)\s*@\s*(?P<company>[A-Z][A-Za-z0-9 &.,'\-]+)$")),
)
_TITLE_LINE_RE = re.compile(r"^[A-Z][A-Za-z &/\-]{3,}$")
_COMPANY_LINE_RE = re.compile(r"^[A-Z][A-Za-z0-9 &.,'\-]{3,}$")

_NOTES_SKIP_RE = re.compile(r"\b(?:phone|email|tel|mobile)\b", re.IGNORECASE)


def heading_kind(line: str) -> str | None:
    """Return the section a heading line introduces, if it is one."""
    key = line.strip().rstrip(":").strip().lower()
    for kind, headings in SECTION_HEADINGS.items():
        if key in headings:
            return kind
    return None


def digit_count(value: str) -> int:
    return sum(1 for char in value if char.isdigit())


def is_valid_email(value: str) -> bool:
    return bool(value) and ".." not in value and VALID_EMAIL_RE.fullmatch(value) is not None


# --- name -------------------------------------------------------------------


def _name_tokens(line: str) -> list[str] | None:
    tokens = line.split(" ")
    for token in tokens:
        bare = token.replace("-", "").replace("'", "").replace("’", "")
        if len(token) < 2 or not bare.isalpha() or not token[0].isupper():
            return None
        if token.lower() in NAME_STOPWORDS:
            return None
    return tokens


def _proper_case(token: str) -> str:
    if token.isupper() and len(token) > 1:
        return "-".join(part.capitalize() for part in token.split("-"))
    return token


def extract_name(lines: Sequence[str], *, lookahead: int = 3) -> tuple[str, str]:
    """Split the first name-shaped line of the header into first/last name."""
    window = [line for line in lines[:lookahead] if heading_kind(line) is None]
    for line in window:
        tokens = _name_tokens(line)
        if tokens and 2 <= len(tokens) <= 4:
            tokens = [_proper_case(token) for token in tokens]
            return tokens[0], " ".join(tokens[1:])
    for line in window:
        tokens = _name_tokens(line)
        if tokens and len(tokens) == 1:
            return _proper_case(tokens[0]), ""
    return "", ""


# --- contact details --------------------------------------------------------


def extract_email(text: str) -> str:
    match = EMAIL_RE.search(text)
    return match.group(0) if match else ""


def _best_phone(text: str) -> str:
    for _, pattern in PHONE_PATTERNS:
        candidates = [
            match.group(0).strip(" -")
            for match in pattern.finditer(text)
            if PHONE_MIN_DIGITS <= digit_count(match.group(0)) <= PHONE_MAX_DIGITS
        ]
        if candidates:
            # Longest digit run is treated as the most complete number.
            return max(candidates, key=digit_count)
    return ""


def extract_phone(text: str, *, header_window: int = 500) -> str:
    """Search the header window first, then the whole document."""
    return _best_phone(text[:header_window]) or _best_phone(text)


# --- current role -----------------------------------------------------------


def _find_experience_heading(lines: Sequence[str]) -> int | None:
    for index, line in enumerate(lines):
        if line.strip().rstrip(":").lower() in PREFERRED_EXPERIENCE_HEADINGS:
            return index
    for index, line in enumerate(lines):
        looks_like_heading = (
            len(line) <= 40
            and not re.search(r"[.,;]", line)
            and not line.startswith(("•", "-", "*"))
            and _EXPERIENCE_HINT_RE.search(line) is not None
            and heading_kind(line) != "summary"
        )
        if looks_like_heading:
            return index
    return None


def _clean_employer(value: str) -> str:
    value = value.split("(", 1)[0]
    value = _DATE_TAIL_RE.sub("", value)
    return value.strip(" ,.;:-–—|")


def _is_generic_title(title: str) -> bool:
    return title.lower() in NON_TITLE_WORDS or INSTITUTION_BLACKLIST_RE.fullmatch(title) is not None


def _title_from_line(line: str) -> str:
    for pattern in (_ROLE_TITLE_RE, _CAPITALISED_PHRASE_RE):
        match = pattern.match(line)
        if match and len(match.group(1).strip()) > 3:
            return match.group(1).strip()
    return ""


def _employer_from_line(rest: str) -> str:
    for pattern in _EMPLOYER_ON_LINE_PATTERNS:
        match = pattern.search(rest)
        if match:
            employer = _clean_employer(match.group(1))
            if len(employer) > 2:
                return employer
    return ""


def _usable_employer_line(line: str) -> bool:
    return (
        2 < len(line) < 100
        and "@" not in line
        and heading_kind(line) is None
        and bool(_clean_employer(line))
    )


def _role_from_experience_section(lines: Sequence[str], start: int, window: int) -> tuple[str, str]:
    stop = min(start + 1 + window, len(lines))
    for index in range(start + 1, stop):
        line = lines[index]
        if len(line) < 3 or "@" in line:
            continue
        if heading_kind(line) not in (None, "experience"):
            break
        title = _title_from_line(line)
        if not title or _is_generic_title(title):
            continue
        following = lines[index + 1] if index + 1 < len(lines) else ""
        # "Acme Ltd" followed by "Policy Advisor": company first, role second.
        if (
            COMPANY_SUFFIX_RE.search(line)
            and not ROLE_KEYWORD_RE.search(line)
            and following
            and ROLE_KEYWORD_RE.search(following)
        ):
            return _title_from_line(following) or following, _clean_employer(line)
        employer = _employer_from_line(line[len(title):])
        if not employer and following and _usable_employer_line(following):
            employer = _clean_employer(following)
        if employer and INSTITUTION_BLACKLIST_RE.fullmatch(employer):
            employer = ""
        return title, employer
    return "", ""


def _company_ok(company: str) -> bool:
    if INSTITUTION_BLACKLIST_RE.search(company):
        return False
    return bool(
        COMPANY_SUFFIX_RE.search(company)
        or ORGANISATION_WORD_RE.search(company)
        or len(company.split()) >= 2
    )


def _title_ok(title: str) -> bool:
    return ROLE_KEYWORD_RE.search(title) is not None and not INSTITUTION_BLACKLIST_RE.search(title)


def _role_from_header(lines: Sequence[str], scan_lines: int) -> tuple[str, str]:
    window = list(lines[:scan_lines])
    for index, line in enumerate(window):
        if len(line) < 3:
            continue
        for _, pattern in _HEADER_ROLE_PATTERNS:
            match = pattern.match(line)
            if not match:
                continue
            title = match.group("title").strip()
            company = _clean_employer(match.group("company"))
            if _title_ok(title) and _company_ok(company):
                return title, company
        if index + 1 < len(window):
            following = window[index + 1]
            looks_like_title = _TITLE_LINE_RE.match(line) and not COMPANY_SUFFIX_RE.search(line)
            looks_like_company = _COMPANY_LINE_RE.match(following) and COMPANY_SUFFIX_RE.search(following)
            if looks_like_title and looks_like_company and _title_ok(line):
                return line, following
    return "", ""


def extract_current_role(
    lines: Sequence[str],
    *,
    experience_window: int = 10,
    header_lines: int = 15,
) -> tuple[str, str]:
    """Return ``(title, employer)`` of the most recent role."""
    title, employer = "", ""
    start = _find_experience_heading(lines)
    if start is not None:
        title, employer = _role_from_experience_section(lines, start, experience_window)
    if not title or not employer:
        header_title, header_employer = _role_from_header(lines, header_lines)
        title = title or header_title
        employer = employer or header_employer
    return title, employer


# --- skills, experience, notes ------------------------------------------------


def extract_skills(text: str) -> list[Skill]:
    return [skill for skill, pattern in SKILL_PATTERNS.items() if pattern.search(text)]


def _is_experience_row_candidate(line: str) -> bool:
    return (
        len(line) <= MAX_EXPERIENCE_ROW_LENGTH
        and "@" not in line
        and _YEAR_RE.search(line) is not None
        and heading_kind(line) not in ("summary", "education", "skills")
    )


def extract_experience(lines: Iterable[str]) -> list[ExperienceEntry]:
    entries: list[ExperienceEntry] = []
    for line in lines:
        if not _is_experience_row_candidate(line):
            continue
        for pattern in EXPERIENCE_ROW_PATTERNS:
            match = pattern.match(line)
            if not match:
                continue
            end = match.group("end")
            if end.lower() in ("present", "current"):
                end = "Present"
            entries.append(
                ExperienceEntry(
                    title=match.group("title").strip(" ,-–—"),
                    employer=match.group("employer").strip(" ,-–—"),
                    start=match.group("start"),
                    end=end,
                )
            )
            break
    return entries


def _substantive(line: str, min_length: int = 20) -> bool:
    return (
        len(line) > min_length
        and "@" not in line
        and _YEAR_RE.search(line) is None
        and _NOTES_SKIP_RE.search(line) is None
        and heading_kind(line) is None
    )


def _truncate(value: str, max_length: int) -> str:
    if len(value) <= max_length:
        return value
    return value[:max_length].rstrip() + "..."


def extract_notes(
    lines: Sequence[str],
    *,
    max_length: int = 200,
    max_lines: int = 3,
    fallback_lines: int = 5,
) -> str:
    """Excerpt of the summary section, or of the opening lines."""
    picked: list[str] = []
    for index, line in enumerate(lines):
        if heading_kind(line) != "summary":
            continue
        for candidate in lines[index + 1 :]:
            if heading_kind(candidate) is not None or len(picked) >= max_lines:
                break
            if len(candidate) > 3 and "@" not in candidate:
                picked.append(candidate)
        if picked:
            break
    if not picked:
        picked = [line for line in lines[:fallback_lines] if _substantive(line)]
    return _truncate(" ".join(picked), max_length)


__all__ = [
    "EMAIL_RE",
    "PHONE_PATTERNS",
    "SKILL_PATTERNS",
    "digit_count",
    "extract_current_role",
    "extract_email",
    "extract_experience",
    "extract_name",
    "extract_notes",
    "extract_phone",
    "extract_skills",
    "heading_kind",
    "is_valid_email",
]
