"""
Use cases layered on top of the stores.

Services orchestrate UserStore/CourseStore calls; they never read or write the
JSON documents themselves.
"""
