"""Personal income, expense and credit-card tracker"""
