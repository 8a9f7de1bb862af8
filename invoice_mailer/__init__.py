"""
Monthly invoice bundler.

Collects Stripe invoices for several accounts and:
- Lists invoices for a billing window (paginated)
- Downloads every invoice PDF with bounded retry
- Merges PDFs per account and status category
- Emails the merged bundles to fixed destination addresses
"""
