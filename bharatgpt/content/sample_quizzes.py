"""
本地测验题库

测验生成工作流不可用时从这里随机挑选一套测验；
数据库初始化时同样据此生成题库测验和对应的学习模块。
"""

SAMPLE_QUIZZES = [
    {
        "title": "Computer Power On",
        "description": "Quiz on Computer Basics",
        "topic": "Computer Basics",
        "level": "beginner",
        "time_limit_minutes": 30,
        "passing_score": 60,
        "questions": [
            {
                "type": "mcq",
                "question": "What is the primary function of the power button on a computer?",
                "options": [
                    "To adjust the volume",
                    "To turn the computer on or off",
                    "To change the screen brightness",
                    "To access the internet",
                ],
                "correct_answer": "To turn the computer on or off",
            },
            {
                "type": "mcq",
                "question": "After pressing the power button, what should you wait for?",
                "options": [
                    "The computer to immediately start working",
                    "The screen to light up and display something",
                    "A beep sound",
                    "The computer to vibrate",
                ],
                "correct_answer": "The screen to light up and display something",
            },
        ],
    },
    {
        "title": "HTML Heading Basics",
        "description": "Quiz on HTML",
        "topic": "HTML",
        "level": "beginner",
        "time_limit_minutes": 30,
        "passing_score": 60,
        "questions": [
            {
                "type": "mcq",
                "question": "What HTML tag is used to create a main heading?",
                "options": ["<heading>", "<head>", "<h1>", "<title>"],
                "correct_answer": "<h1>",
            },
            {
                "type": "short_answer",
                "question": "What does 'h1' typically represent in HTML?",
                "correct_answer": "The most important heading on a page.",
            },
            {
                "type": "true_false",
                "question": "Using multiple h1 tags on a page is generally recommended for good HTML structure.",
                "correct_answer": "false",
            },
        ],
    },
    {
        "title": "Understanding Websites and HTML",
        "description": "Quiz on Websites and HTML",
        "topic": "Web Development",
        "level": "beginner",
        "time_limit_minutes": 30,
        "passing_score": 60,
        "questions": [
            {
                "type": "mcq",
                "question": "What is a website?",
                "options": [
                    "A physical book",
                    "A collection of web pages accessible online",
                    "A type of computer virus",
                    "A social media platform",
                ],
                "correct_answer": "A collection of web pages accessible online",
            },
            {
                "type": "mcq",
                "question": "Which language is used to structure the content of a webpage?",
                "options": ["CSS", "JavaScript", "HTML", "Python"],
                "correct_answer": "HTML",
            },
            {
                "type": "mcq",
                "question": "What does HTML stand for?",
                "options": [
                    "Hyper Text Markup Language",
                    "Highly Technical Machine Language",
                    "Hyperlink and Text Management Language",
                    "Home Tool Markup Language",
                ],
                "correct_answer": "Hyper Text Markup Language",
            },
        ],
    },
    {
        "title": "Basic Python Syntax",
        "description": "Quiz on Introduction to Python",
        "topic": "Python",
        "level": "beginner",
        "time_limit_minutes": 30,
        "passing_score": 60,
        "questions": [
            {
                "type": "mcq",
                "question": "What is the output of the following code?\nprint(\"Hello, World!\")",
                "options": ["Hello, World!", "World, Hello!", "Error", "Nothing"],
                "correct_answer": "Hello, World!",
            },
            {
                "type": "mcq",
                "question": "Which keyword is used to print output in Python?",
                "options": ["print()", "display()", "show()", "write()"],
                "correct_answer": "print()",
            },
            {
                "type": "mcq",
                "question": "What is a comment in Python used for?",
                "options": ["To execute code", "To store variables", "To explain code", "To create functions"],
                "correct_answer": "To explain code",
            },
        ],
    },
    {
        "title": "Introduction to Python",
        "description": "Quiz on Python Basics",
        "topic": "Python",
        "level": "beginner",
        "time_limit_minutes": 30,
        "passing_score": 60,
        "questions": [
            {
                "type": "mcq",
                "question": "What is Python primarily used for?",
                "options": [
                    "Creating mobile apps only",
                    "Web development, data analysis, and automation",
                    "Database management only",
                    "Game development only",
                ],
                "correct_answer": "Web development, data analysis, and automation",
            },
            {
                "type": "mcq",
                "question": "What does the `print()` function do in Python?",
                "options": [
                    "Calculates a value",
                    "Displays output on the screen",
                    "Defines a new variable",
                    "Imports a library",
                ],
                "correct_answer": "Displays output on the screen",
            },
        ],
    },
]

# 学习模块，按 order_index 排列；subject 与测验 topic 对应
BASE_MODULES = [
    {
        "title": "Computer Basics",
        "description": "Turning on a computer and getting around",
        "subject": "Computer Basics",
        "difficulty_level": "beginner",
        "content": "A computer is switched on with its power button. Wait for the screen to light up before using it.",
        "order_index": 1,
    },
    {
        "title": "HTML",
        "description": "Structuring web pages with HTML",
        "subject": "HTML",
        "difficulty_level": "beginner",
        "content": "HTML stands for HyperText Markup Language. Headings run from <h1> to <h6>.",
        "order_index": 2,
    },
    {
        "title": "Web Development",
        "description": "What websites are and how they are built",
        "subject": "Web Development",
        "difficulty_level": "beginner",
        "content": "A website is a collection of web pages accessible online, structured with HTML.",
        "order_index": 3,
    },
    {
        "title": "Python",
        "description": "First steps with Python",
        "subject": "Python",
        "difficulty_level": "beginner",
        "content": "Python is used for web development, data analysis and automation. print() displays output.",
        "order_index": 4,
    },
]
