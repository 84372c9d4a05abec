"""
Intake - project onboarding wizard for client requests.

Walks a visitor through welcome, name, request, files and thank-you screens
and stores what they hand over in Supabase.
"""

__version__ = "1.0.0"
