"""
Devpost record conversion.

Reshapes records scraped from Devpost project pages into the corpus shape
the app reads (see ProjectRecord). The scraper output is a JSON array of
objects with these keys, all optional:

    title, tagline, fullDescription, aiSummary, whatItDoes, inspiration,
    howWeBuiltIt, challenges, accomplishments, whatWeLearned, whatsNext,
    youtubeLinks[], githubLinks[], prizes[], builtWith[], team[{name}],
    demoUrl, projectUrl, hackathon, submittedDate (ISO timestamp)
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from hackswipe.video import canonical_youtube_url


UNTITLED_PLACEHOLDER = "Untitled Project"
NO_SUMMARY_PLACEHOLDER = "No description available."

# Prize entry that only marks a generic win
WINNER_MARKER = "Winner"

# Characters of a section compared against the AI summary
DEDUP_PREFIX_LENGTH = 50

# (raw key, label) in display order; the AI summary goes first, unlabeled
SUMMARY_SECTIONS = [
    ("whatItDoes", "What it does"),
    ("inspiration", "Inspiration"),
    ("howWeBuiltIt", "How it was built"),
    ("challenges", "Challenges"),
    ("accomplishments", "Accomplishments"),
    ("whatWeLearned", "What we learned"),
    ("whatsNext", "What's next"),
]

_BOLD = re.compile(r"\*\*")
_AI_LABELS = re.compile(r"(?:IDEA SUMMARY|TECHNICAL HIGHLIGHTS)[:\s]*", re.IGNORECASE)
_HEADING = re.compile(r"^#+\s*", re.MULTILINE)
_NUMBERING = re.compile(r"^\d+\.\s*", re.MULTILINE)
_EXTRA_NEWLINES = re.compile(r"\n{3,}")
_WHITESPACE = re.compile(r"\s+")


# =============================================================================
# Field builders
# =============================================================================

def clean_ai_summary(text: Optional[str]) -> str:
    """Strip markdown emphasis, section labels, headings and numbering."""
    if not text:
        return ""
    text = _BOLD.sub("", text)
    text = _AI_LABELS.sub("", text)
    text = _HEADING.sub("", text)
    text = _NUMBERING.sub("", text)
    return text.strip()


def build_summary(raw: Dict[str, Any]) -> str:
    """
    Assemble the display summary from the scraped sections.
    
    Sections already covered by the AI summary (their first 50 characters
    appear in it) are skipped. Falls back to the tagline, then the full
    description.
    
    Args:
        raw: Scraped record.
        
    Returns:
        Summary text (may be empty).
    """
    parts: List[str] = []
    
    ai_summary = clean_ai_summary(raw.get("aiSummary"))
    if ai_summary:
        parts.append(ai_summary)
    
    for key, label in SUMMARY_SECTIONS:
        value = _text(raw.get(key))
        if not value:
            continue
        if ai_summary and value[:DEDUP_PREFIX_LENGTH] in ai_summary:
            continue
        parts.append(f"{label}: {value}")
    
    summary = "\n\n".join(parts)
    
    if not summary:
        summary = _text(raw.get("tagline"))
    if not summary:
        summary = _text(raw.get("fullDescription"))
    
    summary = _BOLD.sub("", summary)
    summary = _EXTRA_NEWLINES.sub("\n\n", summary)
    return summary.strip()


def build_prize(prizes: Optional[List[str]]) -> Optional[str]:
    """Join prize names with "; ", dropping blanks and the bare "Winner" marker."""
    cleaned = []
    for prize in prizes or []:
        if not isinstance(prize, str):
            continue
        prize = _WHITESPACE.sub(" ", prize).strip()
        if prize and prize != WINNER_MARKER:
            cleaned.append(prize)
    return "; ".join(cleaned) or None


def build_date(submitted: Optional[str]) -> Optional[str]:
    """Truncate an ISO timestamp to its date part."""
    if not submitted or not isinstance(submitted, str):
        return None
    return submitted.split("T")[0] or None


def _join(values: Optional[List[Any]]) -> Optional[str]:
    return ", ".join(str(v) for v in values or [] if v) or None


def _first(values: Optional[List[Any]]) -> Optional[str]:
    for value in values or []:
        if value:
            return value
    return None


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


# =============================================================================
# Record conversion
# =============================================================================

def convert_record(raw: Dict[str, Any], fill_placeholders: bool = False) -> Optional[Dict[str, Any]]:
    """
    Convert one scraped record into the corpus shape.
    
    Args:
        raw: Scraped record.
        fill_placeholders: Give records missing a title or summary a
            placeholder instead of dropping them. Records missing both
            are always dropped.
            
    Returns:
        Corpus dict (camelCase keys), or None if the record is dropped.
    """
    title = _text(raw.get("title"))
    summary = build_summary(raw)
    
    if not title and not summary:
        return None
    if not (title and summary):
        if not fill_placeholders:
            return None
        title = title or UNTITLED_PLACEHOLDER
        summary = summary or NO_SUMMARY_PLACEHOLDER
    
    team = raw.get("team") or []
    team_names = [member.get("name") for member in team if isinstance(member, dict)]
    
    return {
        "title": title,
        "summary": summary,
        "hackathon": raw.get("hackathon") or None,
        "prize": build_prize(raw.get("prizes")),
        "techStack": _join(raw.get("builtWith")),
        "github": _first(raw.get("githubLinks")),
        "youtube": canonical_youtube_url(raw.get("youtubeLinks") or []),
        "demo": raw.get("demoUrl") or None,
        "team": _join(team_names),
        "date": build_date(raw.get("submittedDate")),
        "projectUrl": raw.get("projectUrl") or None,
    }


@dataclass
class ConversionResult:
    """Result of converting a scraped dataset."""
    started_at: datetime
    finished_at: Optional[datetime] = None
    records_read: int = 0
    projects: List[Dict[str, Any]] = field(default_factory=list)
    output_path: Optional[str] = None
    dry_run: bool = False
    errors: List[str] = field(default_factory=list)
    
    @property
    def records_written(self) -> int:
        return len(self.projects)
    
    @property
    def records_dropped(self) -> int:
        return self.records_read - self.records_written
    
    @property
    def with_video(self) -> int:
        return sum(1 for p in self.projects if p.get("youtube"))
    
    @property
    def duration_seconds(self) -> float:
        if self.finished_at:
            return (self.finished_at - self.started_at).total_seconds()
        return 0.0
    
    def to_summary(self) -> str:
        """Generate a human-readable summary."""
        lines = [
            "=" * 60,
            "CONVERSION SUMMARY",
            "=" * 60,
            f"Started:  {self.started_at.strftime('%Y-%m-%d %H:%M:%S')}",
            f"Duration: {self.duration_seconds:.2f}s",
            f"Mode:     {'DRY RUN' if self.dry_run else 'LIVE'}",
            "",
            f"Records read:    {self.records_read}",
            f"Projects kept:   {self.records_written}",
            f"Dropped:         {self.records_dropped}",
            f"With video:      {self.with_video}",
        ]
        
        if self.output_path and not self.dry_run:
            lines.append(f"\nSaved to: {self.output_path}")
        elif self.dry_run:
            lines.append("\nOutput: SKIPPED (dry-run mode)")
        
        if self.errors:
            lines.extend(["", "Errors:"])
            for error in self.errors[:5]:
                lines.append(f"  - {error}")
        
        lines.append("=" * 60)
        return "\n".join(lines)


def convert_records(raw_records: List[Any], fill_placeholders: bool = False) -> ConversionResult:
    """
    Convert a scraped dataset, keeping input order.
    
    Args:
        raw_records: Decoded scraper output.
        fill_placeholders: See convert_record.
        
    Returns:
        ConversionResult with converted projects and counts.
    """
    result = ConversionResult(started_at=datetime.now(), records_read=len(raw_records))
    
    for position, raw in enumerate(raw_records):
        if not isinstance(raw, dict):
            result.errors.append(f"Record {position} is not an object")
            continue
        project = convert_record(raw, fill_placeholders=fill_placeholders)
        if project is not None:
            result.projects.append(project)
    
    result.finished_at = datetime.now()
    return result
