"""
coursedb: file-backed persistence for a small learning-management domain.

Two stores own the data: ``UserStore`` (integer user ids) and ``CourseStore``
(string course ids). ``CourseStore`` keeps the denormalized back-references
held by users in sync whenever courses are created, deleted or enrolled in.
"""

__version__ = "0.1.0"
