from pathlib import Path

import pytest

SAMPLE_TABLES = {
    "projects.csv": (
        "id,title,subtitle,description,reversed,hasDetailPage,image,display_order,password\n"
        'splunk,Splunk Dashboards,Observability,"Dashboards, alerts and ""runbooks""",false,TRUE,/images/splunk.png,2,\n'
        "atlas,Atlas,Design system,A shared component library,yes,1,,1,secret\n"
    ),
    "project_details.csv": (
        "project_id,heading,text,image_url,case_study_link,detail_order\n"
        "splunk,Second,Second detail,,,2\n"
        "splunk,First,First detail,/images/d1.png,splunk-deep-dive,1\n"
        "atlas,Only,Only detail,,,\n"
    ),
    "case_study_sections.csv": (
        "project_id,image_url,text,section_title,section_order\n"
        "splunk,/images/cs2.png,Results,,2\n"
        "splunk,/images/cs1.png,Problem,The problem,1\n"
        "splunk-deep-dive,/images/dd1.png,Deep dive intro,Intro,1\n"
        'broken,"unterminated,row\n'
    ),
    "focus_areas.csv": (
        "id,title,subtitle,description,displayOrder\n"
        "research,Research,Methods,How I research,\n"
        "systems,Systems,Scale,Design systems work,1\n"
    ),
    "focus_area_sections.csv": (
        "focus_area_id,image_url,text,sectionTitle,sectionOrder\n"
        "systems,/images/s1.png,Tokens,,1\n"
        "research,/images/r2.png,Synthesis,Synthesis,2\n"
        "research,/images/r1.png,Interviews,Interviews,1\n"
    ),
    "resume_header.csv": (
        "name,title,intro,pdf\n"
        'Ada Lovelace,Designer,"Hello, world",/resume.pdf\n'
    ),
    "resume_experience.csv": (
        "company,location,start_date,end_date,role,description,display_order\n"
        "Beta,Remote,2020,2022,Lead,Led things,2\n"
        "Acme,Berlin,2018,2020,Designer,Made things,1\n"
    ),
    "resume_education.csv": (
        "school,location,start_date,end_date,degree,details,display_order\n"
        "Uni,London,2014,2018,BA,Honours,1\n"
    ),
    # resume_skills.csv is deliberately absent.
}


def write_tables(directory: Path, tables=SAMPLE_TABLES) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    for name, text in tables.items():
        (directory / name).write_text(text, encoding="utf-8")
    return directory


@pytest.fixture
def content_dir(tmp_path):
    return write_tables(tmp_path / "data")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in ("PORTFOLIO_CONFIG", "PORTFOLIO_DATA_DIR", "PORTFOLIO_OUTPUT_DIR"):
        monkeypatch.delenv(key, raising=False)
