# Utils package for Grammable
