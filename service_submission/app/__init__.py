"""
Submission service application package.

Wires the quota limiter, document models and transports into the
rate-limited SubmissionService.
"""
