"""HTTP host for the publish loop"""
