"""
YouTube Note Summarizer.

This application turns a YouTube video reference into a Markdown summary
inserted into a note, triggered by a command, a paste or a web clip's
front-matter.
"""

from ytnote.config import config

__version__ = config.APP_VERSION
