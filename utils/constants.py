"""
utils/constants.py

Purpose: Centralized static content

- Client-facing messages
- Status values and enums
- Naming conventions for generated files

(Prevents hardcoding across the codebase)
"""

# ============================================================
# STATUS VALUES
# ============================================================

ACCOUNT_ACTIVE = "active"

SUBSCRIPTION_FREE = "free"

FILE_ACTIVE = "active"
FILE_DELETED = "deleted"

MERGE_COMPLETED = "completed"

COMPRESSION_NONE = "none"

ANNOTATION_TYPES = ("text", "highlight", "stamp", "image")

# ============================================================
# GENERATED FILES
# ============================================================

PDF_MIME_TYPE = "application/pdf"
PDF_EXTENSION = ".pdf"

EDITED_FILE_PREFIX = "edited-"
MERGED_FILE_PREFIX = "merged-"
EDITED_DISPLAY_PREFIX = "Edited_"

# ============================================================
# MESSAGES
# ============================================================

MSG_REGISTERED = "User registered successfully"
MSG_LOGGED_IN = "Login successful"
MSG_LOGGED_OUT = "Logout successful. Please remove token from client."

MSG_EMAIL_TAKEN = "User with this email already exists"
MSG_INVALID_CREDENTIALS = "Invalid credentials"
MSG_ACCOUNT_INACTIVE = "Account is not active"
MSG_TOKEN_MISSING = "Not authorized, no token provided"
MSG_TOKEN_INVALID = "Not authorized, token invalid"
MSG_TOKEN_EXPIRED = "Not authorized, token expired"

MSG_NO_FILES = "No files uploaded"
MSG_TOO_MANY_FILES = "Too many files, at most {limit} per upload"
MSG_FILES_UPLOADED = "{count} file(s) uploaded successfully"
MSG_FILE_NOT_FOUND = "File not found"
MSG_FILE_UPDATED = "File updated successfully"
MSG_FILE_DELETED = "File deleted successfully"
MSG_ONLY_PDF = "Only PDF files are allowed"
MSG_FILE_TOO_LARGE = "File exceeds the maximum size of {limit} bytes"
MSG_INVALID_PDF = "File could not be read as a PDF"

MSG_PDF_MODIFIED = "PDF modified successfully"
MSG_MODIFY_FAILED = "Error modifying PDF"

MSG_MERGE_MIN_FILES = "At least 2 files are required for merging"
MSG_MERGE_NAME_REQUIRED = "Operation name is required"
MSG_MERGE_FILES_MISSING = "One or more files not found"
MSG_MERGE_FILE_NOT_ON_DISK = "File {name} not found on disk"
MSG_MERGED = "PDFs merged successfully"
MSG_MERGE_FAILED = "Error merging PDFs"
MSG_MERGE_NOT_FOUND = "Merge operation not found"
MSG_INVALID_ANNOTATION = "Invalid annotation type"
MSG_ANNOTATION_ADDED = "Annotation added successfully"
