"""Onboarding results, wizard and console prompting."""