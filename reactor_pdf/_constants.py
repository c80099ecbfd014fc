"""Common literal values used across reactor_pdf.

These constants keep file names, sentinel refs, and bundle names centralized so
the pipeline, the aggregator, and tests can import the same values without
drifting. Intended for internal use within the reactor_pdf package.

Examples
--------
>>> from reactor_pdf import _constants
>>> _constants.TOC_FILENAME
'toc.json'
>>> _constants.LOCALIZED_DESCRIPTOR_TEMPLATE.format(stem="pdf", language="fr", suffix=".xml")
'pdf_fr.xml'
"""

PROJECT_FILENAME = "project.yaml"
TOC_FILENAME = "toc.json"
PROJECT_INFO_REF = "project-info"
MESSAGE_BUNDLE = "pdf-plugin"

DEFAULT_DESCRIPTOR = "src/site/pdf.xml"
DEFAULT_SITE_DIRECTORY = "src/site"
DEFAULT_BUILD_DIRECTORY = "target"
WORKING_DIRECTORY_NAME = "pdf"
AGGREGATE_DIRECTORY_NAME = "pdf-aggregate"
GENERATED_SITE_DIRECTORY_NAME = "generated-site"
SITE_TMP_DIRECTORY_NAME = "site.tmp"
GENERATED_SITE_TMP_DIRECTORY_NAME = "generated-site.tmp"

LOCALIZED_DESCRIPTOR_TEMPLATE = "{stem}_{language}{suffix}"
PDF_SUFFIX = ".pdf"

VCS_EXCLUDES = (".git", ".svn", ".hg", ".bzr", "CVS", ".gitignore", ".DS_Store")
