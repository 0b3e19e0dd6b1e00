"""onelogin-aws: temporary AWS credentials through OneLogin SAML."""

__version__ = "0.1.0"
