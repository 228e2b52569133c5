from .app import create_development_app

if __name__ == "__main__":
    create_development_app().run()
