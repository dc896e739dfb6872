"""
Services
- token_authority: session token issue/verify
- account_store: member and operator accounts
- registration_workflow: membership request state machine
- content_store: multilingual page content
- notifier: templated e-mail
- allowlist: post-acceptance allow-list commands
"""
