"""
Services for the NEC analysis.
"""
