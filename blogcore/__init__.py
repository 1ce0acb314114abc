"""Blogcore blog content plugin.

This package turns a folder of Markdown/MDX posts into blog pages for a static
site. It works as a set of lifecycle hooks that a host calls: the hooks derive
slugs and tags from front-matter, create ``BlogPost`` nodes, and create one page
per post plus paginated listings and tag pages.

A minimal in-process host (``blogcore.runtime.Site``) drives the hooks for the
CLI, so a site can be built with ``blogcore build`` without any other tool.
"""

__all__ = ["__version__"]
__version__ = "0.3.0"
