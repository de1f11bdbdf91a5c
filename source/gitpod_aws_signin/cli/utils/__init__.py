# ABOUTME: Shared helpers for the Gitpod AWS sign-in CLI
