"""PodDoctor, a POD (Plain Old Documentation) to HTML documentation generator.

The core is L{poddoctor.markup.pod}, which turns a POD document into a flat
list of L{nodes<poddoctor.markup.nodes>}; L{poddoctor.html} renders that list.
"""

import importlib.metadata as importlib_metadata


__version__ = importlib_metadata.version('poddoctor')

__all__ = ["__version__"]
