# Fixed facts about the spreadsheet containers read and written here.

N_NROWS_EXCEL_MAX = 1_048_576
N_NCOLS_EXCEL_MAX = 16_384
N_LEN_EXCEL_SHEET_NAME_MAX = 31
TUP_EXCEL_ILLEGAL = ("*", ":", "?", "/", "\\", "[", "]")

# Container signatures (leading bytes of the file).
BYTES_MAGIC_ZIP = b"PK\x03\x04"
BYTES_MAGIC_OLE2 = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

TUP_EXTS_ZIP = (".xlsx", ".xlsm", ".xltx", ".xltm")
TUP_EXTS_OLE2 = (".xls",)

# OOXML part names used for the sheet -> relationship -> part lookup.
C_PART_WORKBOOK = "xl/workbook.xml"
C_PART_WORKBOOK_RELS = "xl/_rels/workbook.xml.rels"
C_DIR_WORKBOOK = "xl"

C_OUTPUT_EXT = ".xlsx"
C_OUTPUT_STEM_FALLBACK = "split"
