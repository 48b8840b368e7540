from notprofi import create_app

app = create_app()
