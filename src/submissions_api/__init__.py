"""Feedback submissions API: accepts form submissions and stores them as JSON objects in S3."""
