from roomchat.main import run

run()
