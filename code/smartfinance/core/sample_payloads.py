SAMPLE_REQUEST = {
    "profile": {
        "age": 28,
        "monthlyIncome": 50000,
        "monthlyExpenses": 30000,
        "currentSavings": 10000,
        "riskLevel": "Medium",
        "financialGoal": "Wealth Creation",
    },
    "topics": ["Stocks", "Emergency Fund"],
}

SAMPLE_ANALYSIS = {
    "overview": "You save 40% of your income each month, but your cash buffer covers only a few days of expenses.",
    "suggestions": [
        {
            "field": "Stocks",
            "status": "Good",
            "title": "Start a steady equity allocation",
            "content": "With a medium risk tolerance and ₹20,000 of monthly surplus, a diversified index fund fits your wealth goal.",
            "actionItem": "Invest ₹8,000 per month in a broad market index fund.",
        },
        {
            "field": "Emergency Fund",
            "status": "Alert",
            "title": "Build a six-month buffer",
            "content": "Your ₹10,000 of savings covers about ten days of expenses.",
            "actionItem": "Set aside ₹12,000 per month until you reach ₹1,80,000.",
        },
    ],
}
