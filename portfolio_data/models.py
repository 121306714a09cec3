"""
Output document shapes.

Each dataclass owns a `to_dict` that copies only the public fields, in the
order the presentation layer expects. Sort keys used while building never
reach these objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

Number = Union[int, float]


@dataclass(frozen=True)
class Section:
    """A case-study or focus-area section."""

    image: str
    text: str
    section_title: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "image": self.image,
            "text": self.text,
            "sectionTitle": self.section_title,
        }


@dataclass(frozen=True)
class ProjectDetail:
    heading: str
    text: str
    image: str = ""
    case_study_link: str = ""
    password: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "heading": self.heading,
            "text": self.text,
            "image": self.image,
            "caseStudyLink": self.case_study_link,
            "password": self.password,
        }


@dataclass
class Project:
    id: str
    title: str
    subtitle: str
    description: str
    reversed: bool
    has_detail_page: bool
    details: List[ProjectDetail] = field(default_factory=list)
    image: str = ""
    images: List[str] = field(default_factory=list)
    case_study: List[Section] = field(default_factory=list)
    display_order: Number = 0
    password: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "description": self.description,
            "reversed": self.reversed,
            "hasDetailPage": self.has_detail_page,
            "details": [d.to_dict() for d in self.details],
            "image": self.image,
            "images": list(self.images),
            "caseStudy": [s.to_dict() for s in self.case_study],
            "displayOrder": self.display_order,
            "password": self.password,
        }


@dataclass
class OrphanCaseStudy:
    """Case-study sections keyed by an id that no project card carries."""

    id: str
    case_study: List[Section] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "caseStudy": [s.to_dict() for s in self.case_study]}


@dataclass
class FocusArea:
    id: str
    title: str
    subtitle: str
    description: str
    sections: List[Section] = field(default_factory=list)
    display_order: Number = 0
    password: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "description": self.description,
            "sections": [s.to_dict() for s in self.sections],
            "displayOrder": self.display_order,
            "password": self.password,
        }


@dataclass(frozen=True)
class Experience:
    company: str
    location: str
    start_date: str
    end_date: str
    role: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "company": self.company,
            "location": self.location,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "role": self.role,
            "description": self.description,
        }


@dataclass(frozen=True)
class Education:
    school: str
    location: str
    start_date: str
    end_date: str
    degree: str
    details: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "school": self.school,
            "location": self.location,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "degree": self.degree,
            "details": self.details,
        }


@dataclass(frozen=True)
class SkillCategory:
    category: str
    items: str

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "items": self.items}


@dataclass
class ResumeDocument:
    header: Dict[str, str] = field(default_factory=dict)
    experience: List[Experience] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    skills: List[SkillCategory] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "header": dict(self.header),
            "experience": [e.to_dict() for e in self.experience],
            "education": [e.to_dict() for e in self.education],
            "skills": [s.to_dict() for s in self.skills],
        }


@dataclass
class DocumentSet:
    """Everything one build produces, ready for the writer."""

    projects: List[Project] = field(default_factory=list)
    focus_areas: List[FocusArea] = field(default_factory=list)
    resume: ResumeDocument = field(default_factory=ResumeDocument)
    case_studies: List[OrphanCaseStudy] = field(default_factory=list)

    def to_documents(self) -> Dict[str, Any]:
        """Serializable payload per output document name."""

        return {
            "projects": [p.to_dict() for p in self.projects],
            "focus_areas": [f.to_dict() for f in self.focus_areas],
            "resume": self.resume.to_dict(),
            "case_studies": [c.to_dict() for c in self.case_studies],
        }
