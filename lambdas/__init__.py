# Lambda Functions
"""
AWS Lambda entry points.

- process_submission: SNS-triggered submission ingestion
"""
