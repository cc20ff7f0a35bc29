from __future__ import annotations

import time

from cvparser.core.fields import (
    extract_current_role,
    extract_email,
    extract_experience,
    extract_name,
    extract_notes,
    extract_phone,
    extract_skills,
    heading_kind,
    is_valid_email,
)
from cvparser.schemas import ExperienceEntry, Skill


def test_name_skips_resume_heading_words():
    lines = ["Curriculum Vitae", "Jane Doe", "jane.doe@example.com"]

    assert extract_name(lines) == ("Jane", "Doe")


def test_name_all_caps_is_proper_cased():
    assert extract_name(["JANE DOE"]) == ("Jane", "Doe")


def test_name_keeps_hyphens_and_apostrophes():
    assert extract_name(["Mary-Jane O'Neil"]) == ("Mary-Jane", "O'Neil")


def test_name_middle_names_go_to_last_name():
    assert extract_name(["Anna Maria Lopez"]) == ("Anna", "Maria Lopez")


def test_single_token_yields_first_name_only():
    assert extract_name(["Jane", "jane@example.com"]) == ("Jane", "")


def test_name_is_never_guessed_from_email():
    lines = ["jane.doe@example.com", "+44 20 7946 0958"]

    assert extract_name(lines) == ("", "")


def test_name_outside_lookahead_is_ignored():
    lines = ["Résumé", "Contact", "Phone: 0123", "Jane Doe"]

    assert extract_name(lines) == ("", "")


def test_email_first_match():
    text = "Contact: jane.doe@example.co.uk or jd@work.org."

    assert extract_email(text) == "jane.doe@example.co.uk"
    assert extract_email("no address here") == ""


def test_email_validation():
    assert is_valid_email("jane.doe@example.com")
    assert not is_valid_email("jane..doe@example.com")
    assert not is_valid_email("jane@example")
    assert not is_valid_email("")


def test_phone_uk_number():
    assert extract_phone("Jane Doe\n+44 20 7946 0958\n") == "+44 20 7946 0958"


def test_phone_north_american_number():
    assert extract_phone("Phone: +1 (555) 123-4567") == "+1 (555) 123-4567"


def test_phone_international_number():
    assert extract_phone("Mobile +91 98765 43210") == "+91 98765 43210"


def test_phone_national_trunk_number():
    assert extract_phone("Tel 020 7946 0958") == "020 7946 0958"


def test_phone_header_window_wins_over_later_numbers():
    filler = "Experienced organiser. " * 30
    text = f"Jane Doe\n+44 20 7946 0958\n{filler}\nOffice: +44 161 496 0000"

    assert extract_phone(text) == "+44 20 7946 0958"


def test_phone_falls_back_to_full_text():
    filler = "Experienced organiser. " * 30
    text = f"Jane Doe\n{filler}\nMobile: 07700 900123"

    assert len(filler) > 500
    assert extract_phone(text) == "07700 900123"


def test_year_ranges_are_not_phone_numbers():
    assert extract_phone("Policy Officer 2015 - 2019") == ""
    assert extract_phone("Call me maybe") == ""


def test_role_from_experience_section_with_employer_on_next_line():
    lines = ["Jane Doe", "Work Experience", "Communications Manager", "Oxfam GB", "2018 - Present"]

    assert extract_current_role(lines) == ("Communications Manager", "Oxfam GB")


def test_role_from_experience_section_skips_generic_nouns():
    lines = ["Professional Experience", "Government", "Campaign Director at Friends Trust"]

    assert extract_current_role(lines) == ("Campaign Director", "Friends Trust")


def test_role_skips_career_summary_heading():
    lines = [
        "Jane Doe",
        "Career Summary",
        "Public affairs specialist with ten years of experience",
        "Employment History",
        "Campaign Director at Friends Trust",
    ]

    assert extract_current_role(lines) == ("Campaign Director", "Friends Trust")


def test_role_header_title_comma_company():
    lines = ["Jane Doe", "Head of Policy, Shelter Trust"]

    assert extract_current_role(lines) == ("Head of Policy", "Shelter Trust")


def test_role_header_company_dash_title():
    lines = ["Jane Doe", "Greenfield Partners — Campaigns Officer"]

    assert extract_current_role(lines) == ("Campaigns Officer", "Greenfield Partners")


def test_role_header_title_at_symbol_company():
    lines = ["Jane Doe", "Press Officer @ Acme Ltd"]

    assert extract_current_role(lines) == ("Press Officer", "Acme Ltd")


def test_role_header_title_line_then_company_line():
    lines = ["Jane Doe", "Policy Analyst", "Brightwater Consulting Ltd"]

    assert extract_current_role(lines) == ("Policy Analyst", "Brightwater Consulting Ltd")


def test_role_rejects_blacklisted_company():
    lines = ["Jane Doe", "Policy Advisor at European Parliament"]

    assert extract_current_role(lines) == ("", "")


def test_skills_are_independent_flags_in_enum_order():
    text = "Grassroots organising, lobbying MPs and press work"

    assert extract_skills(text) == [Skill.COMMUNICATIONS, Skill.CAMPAIGNS, Skill.PUBLIC_AFFAIRS]


def test_skills_use_word_boundaries():
    assert extract_skills("Approved the budget and improved processes") == []


def test_experience_rows_in_both_shapes():
    lines = [
        "Senior Policy Advisor at Acme Group, 2019–Present",
        "Policy Officer — Northfield Council (2015–2019)",
        "Campaigns Lead at Shelter, 2012 - current",
        "Advisor at jane@example.com, 2010-2011",
        "Education",
    ]

    assert extract_experience(lines) == [
        ExperienceEntry(title="Senior Policy Advisor", employer="Acme Group", start="2019", end="Present"),
        ExperienceEntry(title="Policy Officer", employer="Northfield Council", start="2015", end="2019"),
        ExperienceEntry(title="Campaigns Lead", employer="Shelter", start="2012", end="Present"),
    ]


def test_experience_ignores_long_separator_heavy_lines():
    started = time.perf_counter()
    entries = extract_experience(["Policy work - " * 6000, "Policy work - " * 22 + "(2015 - 2019)"])

    assert time.perf_counter() - started < 1.0
    assert entries == []


def test_notes_from_summary_section():
    lines = [
        "Jane Doe",
        "Profile",
        "Public affairs specialist with ten years of experience.",
        "Fluent in French.",
        "Work Experience",
        "Policy Officer — Northfield Council (2015–2019)",
    ]

    assert extract_notes(lines) == "Public affairs specialist with ten years of experience. Fluent in French."


def test_notes_fall_back_to_first_substantive_lines():
    lines = ["Jane Doe", "jane@example.com", "Experienced campaigner with a passion for housing justice"]

    assert extract_notes(lines) == "Experienced campaigner with a passion for housing justice"


def test_notes_are_truncated():
    notes = extract_notes(["Summary", "a" * 250])

    assert notes == "a" * 200 + "..."


def test_heading_kind():
    assert heading_kind("Work Experience:") == "experience"
    assert heading_kind("PROFILE") == "summary"
    assert heading_kind("Policy Advisor") is None
