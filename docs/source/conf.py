# Configuration file for the Sphinx documentation builder.
#
# https://www.sphinx-doc.org/en/master/usage/configuration.html

from tidysf import __version__

# -- Project information -----------------------------------------------------

project = 'tidysf'
copyright = '2025, tidysf'
author = 'tidysf'
release = __version__

# -- General configuration ---------------------------------------------------

extensions = [
    "myst_parser",
    "sphinx.ext.autodoc",
    "sphinx.ext.napoleon",   # docstrings NumPy dos verbos e do FeatureIO
    "sphinx_autodoc_typehints",
]

myst_enable_extensions = [
    "colon_fence",
]

templates_path = ['_templates']
exclude_patterns = []

language = 'pt_BR'

# -- Options for HTML output -------------------------------------------------

html_theme = "pydata_sphinx_theme"

html_theme_options = {
    "navigation_depth": 3,
    "collapse_navigation": True,
}
