# main.py

# Convenience launcher for running from a source checkout: `python main.py gui`.
# All commands live in emoji_dictionary.main.
from emoji_dictionary.main import main

if __name__ == '__main__':
    main()
