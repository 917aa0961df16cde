"""Prompt templates for the AI proofreading analyzer."""
