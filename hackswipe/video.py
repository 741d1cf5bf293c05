"""
YouTube link helpers.

Used to partition the corpus (video-bearing projects are shown first), to
render the embedded player, and by the converter to pick a canonical link.
"""

import re
from typing import Iterable, Optional

# watch?v=<id>, youtu.be/<id>, embed/<id>; the id ends at &, ? or #
YOUTUBE_ID_PATTERN = re.compile(
    r"(?:youtube\.com/watch\?v=|youtu\.be/|youtube\.com/embed/)([^&?#]+)"
)

EMBED_ID_PATTERN = re.compile(r"embed/([^?]+)")

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
EMBED_URL = "https://www.youtube.com/embed/{video_id}?rel=0&modestbranding=1"


def youtube_id(url: Optional[str]) -> Optional[str]:
    """
    Extract the video id from a YouTube URL.
    
    Args:
        url: Candidate URL (may be None or empty).
        
    Returns:
        The video id, or None if the URL is not a recognised YouTube link.
    """
    if not url:
        return None
    match = YOUTUBE_ID_PATTERN.search(url)
    return match.group(1) if match else None


def has_video(url: Optional[str]) -> bool:
    """Check whether a URL resolves to a YouTube video."""
    return youtube_id(url) is not None


def embed_url(url: Optional[str]) -> Optional[str]:
    """Build the player URL for a YouTube link, or None if there is no video."""
    video_id = youtube_id(url)
    if video_id is None:
        return None
    return EMBED_URL.format(video_id=video_id)


def canonical_youtube_url(links: Iterable[str]) -> Optional[str]:
    """
    Pick one shareable YouTube URL from a list of scraped links.
    
    A direct watch or youtu.be link wins. Otherwise the first link is
    treated as an embed URL and rewritten to the watch form.
    
    Args:
        links: Scraped links in page order.
        
    Returns:
        A watch/short URL, or None if nothing usable was found.
    """
    links = [link for link in links or [] if link]
    if not links:
        return None
    
    for link in links:
        if "youtube.com/watch" in link or "youtu.be/" in link:
            return link
    
    match = EMBED_ID_PATTERN.search(links[0])
    if match:
        return WATCH_URL.format(video_id=match.group(1))
    return None
