"""
Shared building blocks of the license inventory service.

Acting-user value objects, domain exceptions and events, the in-process
event bus with its audit and metrics subscribers, request middleware and
health endpoints.
"""
