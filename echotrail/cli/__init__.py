"""EchoTrail CLI - Developer command-line interface."""
