"""
Category Definitions
====================

Which output folder a file lands in, decided by its extension alone.
Screenshot detection from sniffed metadata happens in the planner and
overrides this table for images.
"""

from enum import Enum
from typing import Dict, Iterable, Optional, Tuple


class FileCategory(Enum):
    """Main folders created inside the sweep output folder."""
    DOCUMENTS = "Documents"
    IMAGES = "Images"
    AUDIO = "Audio"
    VIDEO = "Video"
    ARCHIVES = "Archives"
    INSTALLERS = "Installers"
    CODE = "Code"
    DATA = "Data"
    EBOOKS = "Ebooks"
    FONTS = "Fonts"
    OTHER = "Other"


class ImageSubcategory(Enum):
    """Folders under Images/."""
    PHOTO = "Photos"
    SCREENSHOT = "Screenshots"
    GRAPHIC = "Graphics"
    ICON = "Icons"
    RAW = "RAW"
    ARTWORK = "Artwork"


Rule = Tuple[FileCategory, Optional[str], str]

# (category, subcategory, space separated extensions)
DEFAULT_RULES: Tuple[Rule, ...] = (
    (FileCategory.DOCUMENTS, "PDF", ".pdf"),
    (FileCategory.DOCUMENTS, "Word", ".doc .docx .odt .rtf .pages"),
    (FileCategory.DOCUMENTS, "Text", ".txt .md .tex .log"),
    (FileCategory.DOCUMENTS, "Spreadsheets", ".xls .xlsx .ods .csv .numbers"),
    (FileCategory.DOCUMENTS, "Presentations", ".ppt .pptx .odp .key"),

    (FileCategory.IMAGES, ImageSubcategory.PHOTO.value, ".jpg .jpeg .heic .heif .tif .tiff"),
    (FileCategory.IMAGES, ImageSubcategory.GRAPHIC.value, ".png .gif .bmp .webp .svg"),
    (FileCategory.IMAGES, ImageSubcategory.ICON.value, ".ico"),
    (FileCategory.IMAGES, ImageSubcategory.RAW.value, ".raw .cr2 .nef .arw .dng"),
    (FileCategory.IMAGES, ImageSubcategory.ARTWORK.value, ".psd .ai .xcf"),

    (FileCategory.AUDIO, None, ".mp3 .m4a .aac .flac .wav .ogg .wma .aiff .opus .m4b"),
    (FileCategory.VIDEO, None, ".mp4 .mov .avi .mkv .wmv .flv .webm .m4v .mpeg .mpg .3gp"),
    (FileCategory.ARCHIVES, None, ".zip .rar .7z .tar .gz .bz2 .xz .tgz .tbz2 .lz .lzma"),
    (FileCategory.INSTALLERS, None, ".exe .msi .dmg .pkg .deb .rpm .appimage .snap .flatpak"),

    (FileCategory.CODE, "Python", ".py"),
    (FileCategory.CODE, "JavaScript", ".js .jsx"),
    (FileCategory.CODE, "TypeScript", ".ts .tsx"),
    (FileCategory.CODE, "Java", ".java"),
    (FileCategory.CODE, "C", ".c .h"),
    (FileCategory.CODE, "C++", ".cpp .hpp"),
    (FileCategory.CODE, "C#", ".cs"),
    (FileCategory.CODE, "Go", ".go"),
    (FileCategory.CODE, "Rust", ".rs"),
    (FileCategory.CODE, "Ruby", ".rb"),
    (FileCategory.CODE, "PHP", ".php"),
    (FileCategory.CODE, "R", ".r"),
    (FileCategory.CODE, "SQL", ".sql"),
    (FileCategory.CODE, "Shell", ".sh .bat .ps1"),
    (FileCategory.CODE, "Web", ".html .css"),

    (FileCategory.DATA, "JSON", ".json"),
    (FileCategory.DATA, "XML", ".xml"),
    (FileCategory.DATA, "YAML", ".yaml .yml"),
    (FileCategory.DATA, "Config", ".toml .ini .conf .cfg"),
    (FileCategory.DATA, "Database", ".db .sqlite .sqlite3"),

    (FileCategory.EBOOKS, None, ".epub .mobi .azw .azw3 .fb2 .djvu"),
    (FileCategory.FONTS, None, ".ttf .otf .woff .woff2 .eot"),
)


class CategoryMapping:
    """Extension lookup built from a rule table.

    An extension listed by more than one rule keeps the first match.
    """

    def __init__(self, rules: Iterable[Rule] = DEFAULT_RULES):
        self._table: Dict[str, Tuple[FileCategory, Optional[str]]] = {}
        for category, subcategory, extensions in rules:
            for ext in extensions.split():
                self._table.setdefault(ext.lower(), (category, subcategory))

    def get_category(self, extension: str) -> Tuple[FileCategory, Optional[str]]:
        """Category and subcategory for an extension such as ``".pdf"``.

        Unknown or empty extensions map to ``(FileCategory.OTHER, None)``.
        """
        return self._table.get(extension.lower(), (FileCategory.OTHER, None))


CATEGORY_MAPPING = CategoryMapping()
