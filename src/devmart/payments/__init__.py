"""Payment provider abstraction and the bank-transfer order function."""
