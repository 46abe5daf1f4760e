"""
URL解析モジュール
"""
from urllib.parse import urlparse, parse_qs

from .exceptions import InvalidVideoUrl
from .models import VideoReference

SHORT_HOST = "youtu.be"
SHORTS_SEGMENT = "/shorts/"


def resolve_video_id(url: str) -> VideoReference:
    """
    YouTube の URL から動画IDを取り出す
    
    対応する形式:
        https://youtu.be/<id>
        https://www.youtube.com/shorts/<id>
        https://www.youtube.com/watch?v=<id>
    
    Args:
        url: 動画のURL
        
    Returns:
        VideoReference: 動画ID
        
    Raises:
        InvalidVideoUrl: 動画IDを取り出せない場合
    """
    try:
        parsed = urlparse(url.strip())
        hostname = parsed.hostname
    except (AttributeError, ValueError) as e:
        raise InvalidVideoUrl(url, f"Malformed URL: {e}") from e
    
    if not parsed.scheme or not hostname:
        raise InvalidVideoUrl(url, "Malformed URL")
    
    if hostname == SHORT_HOST:
        video_id = parsed.path[1:]
    elif SHORTS_SEGMENT in parsed.path:
        video_id = parsed.path.split(SHORTS_SEGMENT, 1)[1].split("/", 1)[0]
    else:
        video_id = parse_qs(parsed.query).get("v", [""])[0]
    
    if not video_id:
        raise InvalidVideoUrl(url)
    return VideoReference(video_id)
