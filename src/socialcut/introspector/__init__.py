"""Media introspection via ffprobe."""

from socialcut.introspector.ffprobe import FFprobeIntrospector
from socialcut.introspector.interface import MediaIntrospector
from socialcut.introspector.parsers import parse_ffprobe_output

__all__ = ["FFprobeIntrospector", "MediaIntrospector", "parse_ffprobe_output"]
