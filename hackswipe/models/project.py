"""
Core data model for HackSwipe.

Defines the ProjectRecord dataclass representing one hackathon submission
ready for display. Records are produced by the converter and never change
once loaded.
"""

from dataclasses import dataclass, asdict, fields
from typing import Optional

from hackswipe.video import youtube_id, embed_url


# JSON key (camelCase, as written by the converter) -> attribute name
_JSON_KEYS = {
    "techStack": "tech_stack",
    "projectUrl": "project_url",
}
_ATTR_KEYS = {attr: key for key, attr in _JSON_KEYS.items()}


@dataclass(frozen=True)
class ProjectRecord:
    """
    A single hackathon project.
    
    Attributes:
        title: Project name.
        summary: Display text assembled by the converter.
        hackathon: Event the project was submitted to.
        prize: Prizes won, joined with "; ".
        tech_stack: Technologies, joined with ", ".
        github: Repository URL.
        youtube: Demo video URL.
        demo: Live demo URL.
        team: Member names, joined with ", ".
        date: Submission date (YYYY-MM-DD).
        project_url: Devpost page URL.
    """
    
    title: str
    summary: str
    hackathon: Optional[str] = None
    prize: Optional[str] = None
    tech_stack: Optional[str] = None
    github: Optional[str] = None
    youtube: Optional[str] = None
    demo: Optional[str] = None
    team: Optional[str] = None
    date: Optional[str] = None
    project_url: Optional[str] = None
    
    def __post_init__(self) -> None:
        """Validate fields after initialization."""
        self.validate()
    
    def validate(self) -> None:
        """
        Validate that required fields are present.
        
        Raises:
            ValueError: If validation fails.
        """
        errors = []
        
        if not isinstance(self.title, str) or not self.title.strip():
            errors.append("title is required and cannot be empty")
        
        if not isinstance(self.summary, str) or not self.summary.strip():
            errors.append("summary is required and cannot be empty")
        
        if errors:
            raise ValueError(f"ProjectRecord validation failed: {'; '.join(errors)}")
    
    @property
    def tech_tags(self) -> list[str]:
        """Individual technologies from tech_stack."""
        if not self.tech_stack:
            return []
        return [tag for tag in self.tech_stack.split(", ") if tag]
    
    @property
    def video_id(self) -> Optional[str]:
        """YouTube id of the demo video, if any."""
        return youtube_id(self.youtube)
    
    @property
    def has_video(self) -> bool:
        return self.video_id is not None
    
    @property
    def embed_url(self) -> Optional[str]:
        return embed_url(self.youtube)
    
    def to_dict(self) -> dict:
        """
        Convert to the corpus JSON shape (camelCase keys).
        
        Returns:
            Dictionary representation of this record.
        """
        return {
            _ATTR_KEYS.get(key, key): value
            for key, value in asdict(self).items()
        }
    
    @classmethod
    def from_dict(cls, data: dict) -> "ProjectRecord":
        """
        Create a ProjectRecord from a corpus or snapshot dictionary.
        
        Accepts camelCase and snake_case keys; unknown keys are ignored.
        
        Args:
            data: Dictionary with record fields.
            
        Returns:
            New ProjectRecord instance.
            
        Raises:
            ValueError: If title or summary is missing.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            attr = _JSON_KEYS.get(key, key)
            if attr in known:
                kwargs[attr] = value
        
        if "title" not in kwargs or "summary" not in kwargs:
            raise ValueError("ProjectRecord validation failed: title and summary are required")
        
        return cls(**kwargs)
    
    def __str__(self) -> str:
        """Human-readable string representation."""
        if self.hackathon:
            return f"{self.title} ({self.hackathon})"
        return self.title
