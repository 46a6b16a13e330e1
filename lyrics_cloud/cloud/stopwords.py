"""
Canonical stopword set for word clouds

Common English function words, contraction stems with the apostrophe already
stripped (the tokenizer turns "don't" into "don" + "t", but pasted lyrics
often read "dont"), lyric filler interjections and section labels.
"""

STOP_WORDS = frozenset([
    # Function words and very common verbs
    'the', 'be', 'to', 'of', 'and', 'a', 'in', 'that', 'have', 'i', 'it', 'for', 'not', 'on', 'with',
    'he', 'as', 'you', 'do', 'at', 'this', 'but', 'his', 'by', 'from', 'they', 'we', 'say', 'her',
    'she', 'or', 'an', 'will', 'my', 'one', 'all', 'would', 'there', 'their', 'what', 'so', 'up',
    'out', 'if', 'about', 'who', 'get', 'which', 'go', 'me', 'when', 'make', 'can', 'like', 'time',
    'no', 'just', 'him', 'know', 'take', 'people', 'into', 'year', 'your', 'good', 'some', 'could',
    'them', 'see', 'other', 'than', 'then', 'now', 'look', 'only', 'come', 'its', 'over', 'think',
    'also', 'back', 'after', 'use', 'two', 'how', 'our', 'work', 'first', 'well', 'way', 'even',
    'new', 'want', 'because', 'any', 'these', 'give', 'day', 'most', 'us', 'is', 'was', 'are',
    'been', 'has', 'had', 'were', 'said', 'did', 'am', 'may', 'might', 'must', 'shall', 'should',
    'ought',

    # Contractions written without apostrophe
    'im', 'ive', 'dont', 'cant', 'wont', 'shes', 'hes', 'theyre', 'youre', 'thats', 'whats',
    'lets', 'aint', 'isnt', 'wasnt', 'arent', 'werent', 'hasnt', 'havent', 'hadnt', 'doesnt',
    'didnt', 'wouldnt', 'shouldnt', 'couldnt', 'mustnt', 'mightnt', 'neednt', 'darent',
    'oughtnt', 'shant',

    # Filler interjections
    'yeah', 'oh', 'ooh', 'la', 'na', 'whoa', 'hey', 'uh', 'ah', 'mmm', 'hmm',
    'gonna', 'wanna', 'gotta',

    # Section labels that survive in pasted lyrics
    'chorus', 'verse', 'bridge', 'intro', 'outro', 'repeat',
])
