"""
Integration tests for the submission ingestion flow.

These tests use mocked AWS services to drive the Lambda handler through
fetch, storage, notification and outcome recording.
"""
