"""Constants and configuration defaults for sheetflow."""

class PaginationConstants:
    """Central configuration constants for pagination and the editor."""

    # Sheet metrics in device-independent pixels (96 dpi)
    USABLE_PAGE_HEIGHT = 864  # 9in of drawable content per sheet
    PAGE_MARGIN = 96  # 1in top and bottom margin
    PAGE_GAP = 32  # Workspace gap between sheets

    # Measurement tolerances
    FIT_EPSILON = 1  # Overshoot below this still fits (subpixel rounding)
    OVERFLOW_EPSILON = 1  # Line bottom must exceed remaining space by more than this
    SAME_LINE_EPSILON = 2  # Screen tops closer than this are on the same line

    # Reference text layout
    DOCUMENT_COLUMNS = 65  # Characters per visual line
    LINE_HEIGHT = 24  # Body text line height
    PARAGRAPH_MARGIN = 16  # Space below body paragraphs
    LIST_ITEM_MARGIN = 4  # Space below list items
    HEADING1_LINE_HEIGHT = 40
    HEADING1_MARGIN_TOP = 24
    HEADING1_MARGIN_BOTTOM = 16
    HEADING2_LINE_HEIGHT = 32
    HEADING2_MARGIN_TOP = 20
    HEADING2_MARGIN_BOTTOM = 12

    # Spacer decorations
    PAGE_BREAK_KEY_PREFIX = "page-break-"
    PAGE_BREAK_LABEL = "PAGE {}"

    # Autosave
    AUTOSAVE_SWAP_PREFIX = "."  # Prefix for swap files
    AUTOSAVE_SWAP_SUFFIX = ".swp"  # Suffix for swap files
    SAVED_STATUS = "Saved"
    SAVING_STATUS = "Saving..."
    SAVE_STATUS_DELAY = 1.0  # Seconds before "Saving..." reverts to "Saved"

    # Document defaults
    DEFAULT_TITLE = "Untitled Legal Document"
